class PursuitError(ValueError):
    """Base class for configuration errors raised while building a simulation."""


class DegenerateInputError(PursuitError):
    """Path or segment input that cannot define a usable line (coincident points, too few waypoints)."""


class InvalidRadiusError(PursuitError):
    """Negative lookahead / circle radius."""
