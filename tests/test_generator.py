import typing as ty

import pytest
from hypothesis import given, settings, strategies as st

import geniter as gi
from geniter.base import AdapterState, InvalidStateError


def replay(
    items: ty.Iterable[ty.Any], value: ty.Any = None
) -> ty.Generator[ty.Any, None, ty.Any]:
    """Yields each of ``items``, then returns ``value``."""
    for item in items:
        yield item
    return value


def read_later(data: ty.List[int]) -> ty.Generator[int, None, int]:
    yield len(data)
    return sum(data)


@given(st.lists(st.integers()), st.one_of(st.none(), st.text()))
@settings(max_examples=50)
def test_native_fidelity(items: ty.List[int], value: ty.Any) -> None:
    """Tests that a wrapped Python generator produces its items, then
    its return value.
    """
    capture = gi.gen_iter_return(replay, items, value)
    assert list(capture) == items
    assert capture.try_get_return() == gi.Complete(value)


def test_native_step() -> None:
    gen = gi.NativeGenerator(replay([1], "done"))
    assert gen.step() == gi.Yielded(1)
    assert gen.step() == gi.Complete("done")


def test_native_resume_after_completion() -> None:
    gen = gi.NativeGenerator(replay([], 1))
    assert gen.step() == gi.Complete(1)
    with pytest.raises(InvalidStateError):
        gen.step()


def test_native_rejects_non_generator() -> None:
    with pytest.raises(TypeError):
        gi.NativeGenerator(iter([1, 2]))
    with pytest.raises(TypeError, match="not a generator function"):
        gi.gen_iter(list, [1, 2])


def test_native_exception() -> None:
    def faulty():
        yield 1
        raise KeyError("missing")

    capture = gi.gen_iter_return(faulty)
    assert capture.advance() == 1
    with pytest.raises(KeyError):
        capture.advance()
    assert capture.advance() is None
    assert capture.state is AdapterState.ABANDONED
    assert capture.is_complete() is False


def test_for_loop_then_return() -> None:
    capture = gi.gen_iter_return(replay, [1, 2], "done")
    total, count = 0, 0
    for item in capture:
        total = total + item
        count = count + 1
    assert (total, count) == (3, 2)
    assert capture.is_complete() is True
    assert capture.return_value == "done"


def test_gen_iter() -> None:
    adapter = gi.gen_iter(replay, "ab")
    assert isinstance(adapter, gi.StepAdapter)
    assert [adapter.advance() for _ in range(4)] == ["a", "b", None, None]


def test_capture_by_reference() -> None:
    data = [1, 2]
    capture = gi.gen_iter_return(read_later, data)
    data.append(3)
    assert list(capture) == [3]
    assert capture.return_value == 6


def test_capture_by_value() -> None:
    data = [1, 2]
    capture = gi.gen_iter_return(read_later, data, copy=True)
    data.append(3)
    assert list(capture) == [2]
    assert capture.return_value == 3


def test_decorators() -> None:
    @gi.iter_generator
    def letters(word):
        yield from word

    @gi.iter_generator_return(copy=True)
    def summed(data):
        yield len(data)
        return sum(data)

    assert isinstance(letters("xy"), gi.StepAdapter)
    assert list(letters("xy")) == ["x", "y"]
    assert letters.__name__ == "letters"

    data = [4, 5]
    capture = summed(data)
    data.clear()
    assert isinstance(capture, gi.ResultCapture)
    assert list(capture) == [2]
    assert capture.return_value == 9


def test_close_native() -> None:
    """Tests closing the adapter runs the generator's cleanup."""
    cleaned = []

    def guarded():
        try:
            yield 1
            yield 2
        finally:
            cleaned.append(True)

    with gi.gen_iter(guarded) as adapter:
        assert adapter.advance() == 1
    assert cleaned == [True]
    assert adapter.advance() is None


def test_native_copy_unsupported() -> None:
    adapter = gi.gen_iter(replay, [1])
    with pytest.raises(TypeError, match="cannot be copied"):
        adapter.copy()


def test_native_repr() -> None:
    adapter = gi.gen_iter(replay, [1])
    assert repr(adapter) == "StepAdapter(NativeGenerator(replay))"
