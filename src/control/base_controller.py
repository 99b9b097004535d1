import abc

from src.utils.types import StepResult


class BaseController(abc.ABC):
    @abc.abstractmethod
    def step(self) -> StepResult:
        ...

    @property
    @abc.abstractmethod
    def arrived(self) -> bool:
        ...
