import logging
import typing as ty
from abc import ABC, abstractmethod
from collections.abc import Iterator
from copy import deepcopy
from dataclasses import dataclass
from enum import Enum

from rich.markup import escape
from rich.tree import Tree


__all__ = [
    "Yielded",
    "Complete",
    "GeneratorStep",
    "Generator",
    "GeneratorAdapter",
    "AdapterState",
    "InvalidStateError",
    "ReturnNotReadyError",
]


Y = ty.TypeVar("Y")
R = ty.TypeVar("R")
Self = ty.TypeVar("Self")

_logger = logging.getLogger(__name__)


class InvalidStateError(RuntimeError):
    """A completed generator was about to be resumed, or a captured
    return value was about to be overwritten.
    """


class ReturnNotReadyError(LookupError):
    """The return value was requested before the generator completed."""


@dataclass(frozen=True)
class Yielded(ty.Generic[Y]):
    """The generator suspended, producing ``item``. It may be stepped
    again.
    """

    item: Y


@dataclass(frozen=True)
class Complete(ty.Generic[R]):
    """The generator terminated, producing ``value``. It must not be
    stepped again.
    """

    value: R


GeneratorStep = ty.Union[Yielded[Y], Complete[R]]


class Generator(ABC, ty.Generic[Y, R]):
    """Interface for resumable computations which may be driven by the
    adapters in ``geniter.adapter``.

    Subclasses implement ``step()`` as an explicit state machine, or
    delegate to some other suspension mechanism.
    """

    @abstractmethod
    def step(self) -> "GeneratorStep[Y, R]":
        """Resumes the computation until it next suspends or terminates.

        Calling this again after it has returned ``Complete`` is not
        supported.
        """

    def close(self) -> None:
        """Releases any resources held by the computation."""

    def copy(self: Self) -> Self:
        """Returns an independent copy of the computation."""
        return deepcopy(self)


class AdapterState(Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


class GeneratorAdapter(ABC, Iterator, ty.Generic[Y, R]):
    """Adapter pattern interface, exposing a ``Generator`` through the
    iterator protocol.

    The wrapped generator is stepped only while the adapter is
    ``ACTIVE``. Observing ``Complete`` moves it to ``COMPLETED``, and an
    exception raised by the generator, or a call to ``close()``, moves
    it to ``ABANDONED``. Both are terminal.
    """

    def __init__(self, generator: Generator[Y, R]) -> None:
        if not isinstance(generator, Generator):
            raise TypeError(
                "Expected a geniter.base.Generator, got "
                f"{type(generator).__name__}. Wrap Python generator "
                "objects with geniter.generator.NativeGenerator."
            )
        self._generator = generator
        self._state = AdapterState.ACTIVE

    @property
    def state(self) -> AdapterState:
        return self._state

    @property
    def finished(self) -> bool:
        """Whether the wrapped generator will never be stepped again."""
        return self._state is not AdapterState.ACTIVE

    def _step(self) -> "GeneratorStep[Y, R]":
        try:
            result = self._generator.step()
        except BaseException:
            self._state = AdapterState.ABANDONED
            _logger.debug("%r abandoned, generator raised.", self)
            raise
        if not isinstance(result, (Yielded, Complete)):
            self._state = AdapterState.ABANDONED
            raise TypeError(
                "Generator.step() must return Yielded or Complete, got "
                f"{type(result).__name__}."
            )
        return result

    @abstractmethod
    def _on_complete(self, value: R) -> None:
        """Receives the return value, once, as the generator completes."""

    def __iter__(self: Self) -> Self:
        return self

    def __next__(self) -> Y:
        if self.finished:
            raise StopIteration
        result = self._step()
        if isinstance(result, Yielded):
            return result.item
        self._state = AdapterState.COMPLETED
        _logger.debug("%r completed.", self)
        self._on_complete(result.value)
        raise StopIteration

    def advance(self, default: ty.Any = None) -> ty.Any:
        """Returns the next element of the sequence, or ``default``
        once it is exhausted.

        Parameters
        ----------
        default : Any
            Value signalling exhaustion. Pass a sentinel if the wrapped
            generator may yield ``None``. Default is ``None``.
        """
        return next(self, default)

    def close(self) -> None:
        """Closes the wrapped generator. Further calls to ``advance()``
        return the default, without stepping the generator.
        """
        if self._state is AdapterState.ACTIVE:
            self._state = AdapterState.ABANDONED
            _logger.debug("%r closed before completion.", self)
        self._generator.close()

    def __enter__(self: Self) -> Self:
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def copy(self: Self) -> Self:
        """Returns a copy of the adapter, wrapping a copy of its
        generator. The copy advances independently of the original.

        Raises
        ------
        TypeError
            If the wrapped generator cannot be copied.
        """
        clone = object.__new__(self.__class__)
        clone.__dict__.update(self.__dict__)
        clone._generator = self._generator.copy()
        return clone

    def _fields(self) -> ty.Dict[str, ty.Any]:
        return {"state": self._state.value, "generator": self._generator}

    def __repr__(self) -> str:
        name = self.__class__.__name__
        return f"{name}({self._generator!r})"

    def __rich__(self) -> Tree:
        name = self.__class__.__name__
        tree = Tree(f"[blue]{name}")
        for key, value in self._fields().items():
            tree.add(f"[red]{key} [default]= [green]{escape(repr(value))}")
        return tree
