"""
``geniter.adapter``
===================

Iterators over ``Generator`` instances. ``StepAdapter`` provides the
yielded items only, while ``ResultCapture`` additionally keeps the value
returned when the generator completes.
"""
import typing as ty
import warnings

from geniter.base import (
    Complete,
    Generator,
    GeneratorAdapter,
    InvalidStateError,
    ReturnNotReadyError,
)

__all__ = ["StepAdapter", "ResultCapture"]


Y = ty.TypeVar("Y")
R = ty.TypeVar("R")


class StepAdapter(GeneratorAdapter[Y, R]):
    """Iterator over the items yielded by a generator. Once the
    generator completes the iterator is exhausted for good, and the
    generator is never stepped again.

    :group: Adapters

    Parameters
    ----------
    generator : Generator
        The computation to drive. The adapter takes ownership of it.
    warn_discarded : bool
        Whether to warn when the generator completes with a return
        value other than ``None``, which this adapter discards. Default
        is ``True``.

    Raises
    ------
    TypeError
        If ``generator`` is not a ``geniter.base.Generator``.

    Examples
    --------
    >>> from geniter.generator import NativeGenerator
    >>> def count():
    ...     yield 1
    ...     yield 2
    >>> list(StepAdapter(NativeGenerator(count())))
    [1, 2]
    """

    def __init__(
        self, generator: Generator[Y, R], warn_discarded: bool = True
    ) -> None:
        super().__init__(generator)
        self.warn_discarded = warn_discarded

    def _on_complete(self, value: R) -> None:
        if value is not None and self.warn_discarded:
            warnings.warn(
                f"Generator completed with return value {value!r}, which "
                "StepAdapter discards. Use ResultCapture to keep it.",
                UserWarning,
                stacklevel=3,
            )


class ResultCapture(GeneratorAdapter[Y, R]):
    """Iterator over the items yielded by a generator, which captures
    the generator's return value as it completes.

    :group: Adapters

    Parameters
    ----------
    generator : Generator
        The computation to drive. The adapter takes ownership of it.

    Raises
    ------
    TypeError
        If ``generator`` is not a ``geniter.base.Generator``.

    Notes
    -----
    The return value is stored once, and never replaced or cleared.
    It may be read any number of times via ``try_get_return()`` or
    ``return_value``, independently of iteration.

    Examples
    --------
    >>> from geniter.generator import NativeGenerator
    >>> def count():
    ...     yield 1
    ...     return "done"
    >>> capture = ResultCapture(NativeGenerator(count()))
    >>> list(capture)
    [1]
    >>> capture.return_value
    'done'
    """

    def __init__(self, generator: Generator[Y, R]) -> None:
        super().__init__(generator)
        self._returned: ty.Optional[Complete[R]] = None

    def _on_complete(self, value: R) -> None:
        if self._returned is not None:
            raise InvalidStateError(
                f"Return value already captured as {self._returned.value!r}, "
                f"refusing to overwrite it with {value!r}."
            )
        self._returned = Complete(value)

    def is_complete(self) -> bool:
        """Whether the generator has completed, and its return value
        has been captured.
        """
        return self._returned is not None

    def try_get_return(self) -> ty.Optional[Complete[R]]:
        """Returns the captured return value wrapped in ``Complete``, or
        ``None`` if the generator has not completed yet.

        The wrapper distinguishes a generator which returned ``None``
        from one which is still running.
        """
        return self._returned

    @property
    def return_value(self) -> R:
        """The value returned by the generator on completion.

        Raises
        ------
        ReturnNotReadyError
            If the generator has not completed.
        """
        if self._returned is None:
            raise ReturnNotReadyError(
                f"{self.__class__.__name__} has not completed "
                f"(state: {self.state.value}), no return value available."
            )
        return self._returned.value

    def _fields(self) -> ty.Dict[str, ty.Any]:
        fields = super()._fields()
        if self._returned is not None:
            fields["returned"] = self._returned.value
        return fields

    def __repr__(self) -> str:
        name = self.__class__.__name__
        if self._returned is not None:
            return f"{name}(returned={self._returned.value!r})"
        return f"{name}({self._generator!r})"
