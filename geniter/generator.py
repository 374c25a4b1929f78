"""
``geniter.generator``
=====================

Constructs ``Generator`` instances from Python generator functions, and
wraps them in the adapters of ``geniter.adapter``.

Arguments may be captured by reference, as Python normally does, or by
value, in which case they are deep-copied before the generator function
is called, so that later mutation by the caller cannot be observed by
the running generator.
"""
import functools as fn
import inspect
import logging
import typing as ty
from copy import deepcopy

from geniter.adapter import ResultCapture, StepAdapter
from geniter.base import (
    Complete,
    Generator,
    GeneratorStep,
    InvalidStateError,
    Yielded,
)

__all__ = [
    "NativeGenerator",
    "gen_iter",
    "gen_iter_return",
    "iter_generator",
    "iter_generator_return",
]


Y = ty.TypeVar("Y")
R = ty.TypeVar("R")
GenFunc = ty.Callable[..., ty.Generator[Y, None, R]]

_logger = logging.getLogger(__name__)


class NativeGenerator(Generator[Y, R]):
    """Adapts a Python generator object to the ``Generator`` interface.

    :group: Generators

    Parameters
    ----------
    gen : generator
        Generator object, as returned by calling a generator function.

    Raises
    ------
    TypeError
        If ``gen`` is not a generator object.
    """

    def __init__(self, gen: ty.Generator[Y, None, R]) -> None:
        if not inspect.isgenerator(gen):
            raise TypeError(
                f"Expected a generator object, got {type(gen).__name__}."
            )
        self._gen = gen
        self._done = False

    def step(self) -> GeneratorStep[Y, R]:
        """Runs the generator to its next ``yield`` or ``return``.

        Raises
        ------
        InvalidStateError
            If the generator has already completed. Python would
            silently report ``None`` as the return value again.
        """
        if self._done:
            raise InvalidStateError(
                f"{self!r} has already completed and cannot be resumed."
            )
        try:
            item = next(self._gen)
        except StopIteration as stop:
            self._done = True
            return Complete(stop.value)
        except BaseException:
            self._done = True
            raise
        return Yielded(item)

    def close(self) -> None:
        if not self._done:
            _logger.debug("Closing unfinished %r.", self)
        self._done = True
        self._gen.close()

    def copy(self) -> "NativeGenerator[Y, R]":
        raise TypeError(
            "Python generator objects cannot be copied. Implement "
            "geniter.base.Generator as an explicit state machine to "
            "support copying."
        )

    def __repr__(self) -> str:
        name = self.__class__.__name__
        return f"{name}({self._gen.__qualname__})"


def _call(func: GenFunc, args, kwargs, copy: bool) -> NativeGenerator:
    if not inspect.isgeneratorfunction(func):
        raise TypeError(
            f"{getattr(func, '__qualname__', func)!r} is not a generator "
            "function."
        )
    if copy is True:
        args, kwargs = deepcopy((args, kwargs))
    return NativeGenerator(func(*args, **kwargs))


def gen_iter(
    func: GenFunc, *args: ty.Any, copy: bool = False, **kwargs: ty.Any
) -> StepAdapter:
    """Calls the generator function ``func`` with the given arguments,
    and returns an iterator over the items it yields.

    :group: Generators

    Parameters
    ----------
    func : callable
        Generator function.
    *args, **kwargs
        Passed to ``func``.
    copy : bool
        Whether to capture the arguments by value, deep-copying them
        before the call. Default is ``False``, capturing by reference.

    Returns
    -------
    StepAdapter
        Iterator over the yielded items.

    Raises
    ------
    TypeError
        If ``func`` is not a generator function.
    """
    return StepAdapter(_call(func, args, kwargs, copy))


def gen_iter_return(
    func: GenFunc, *args: ty.Any, copy: bool = False, **kwargs: ty.Any
) -> ResultCapture:
    """Calls the generator function ``func`` with the given arguments,
    and returns an iterator over the items it yields, which captures its
    return value.

    :group: Generators

    Parameters
    ----------
    func : callable
        Generator function.
    *args, **kwargs
        Passed to ``func``.
    copy : bool
        Whether to capture the arguments by value, deep-copying them
        before the call. Default is ``False``, capturing by reference.

    Returns
    -------
    ResultCapture
        Iterator over the yielded items, holding the return value once
        exhausted.

    Raises
    ------
    TypeError
        If ``func`` is not a generator function.
    """
    return ResultCapture(_call(func, args, kwargs, copy))


def iter_generator(
    func: ty.Optional[GenFunc] = None, *, copy: bool = False
) -> ty.Any:
    """Decorator turning a generator function into a function returning
    ``StepAdapter`` instances. May be used bare, or called with
    ``copy=True`` to capture arguments by value.

    :group: Generators
    """
    if func is None:
        return fn.partial(iter_generator, copy=copy)

    @fn.wraps(func)
    def wrapper(*args, **kwargs) -> StepAdapter:
        return gen_iter(func, *args, copy=copy, **kwargs)

    return wrapper


def iter_generator_return(
    func: ty.Optional[GenFunc] = None, *, copy: bool = False
) -> ty.Any:
    """Decorator turning a generator function into a function returning
    ``ResultCapture`` instances. May be used bare, or called with
    ``copy=True`` to capture arguments by value.

    :group: Generators
    """
    if func is None:
        return fn.partial(iter_generator_return, copy=copy)

    @fn.wraps(func)
    def wrapper(*args, **kwargs) -> ResultCapture:
        return gen_iter_return(func, *args, copy=copy, **kwargs)

    return wrapper
