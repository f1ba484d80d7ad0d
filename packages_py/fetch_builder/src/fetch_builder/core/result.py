"""
Builder state: either Ok with the request spec, or Err with the deferred error.
"""
from dataclasses import dataclass
from typing import Callable, Union

from ..types import RequestSpec


@dataclass(frozen=True)
class Ok:
    spec: RequestSpec

    @property
    def is_err(self) -> bool:
        return False

    def map(self, fn: Callable[[RequestSpec], "BuilderState"]) -> "BuilderState":
        return fn(self.spec)


@dataclass(frozen=True)
class Err:
    """Sticky failure. ``spec`` is the request as it was when the error was recorded."""
    error: Exception
    spec: RequestSpec

    @property
    def is_err(self) -> bool:
        return True

    def map(self, fn: Callable[[RequestSpec], "BuilderState"]) -> "BuilderState":
        return self


BuilderState = Union[Ok, Err]
