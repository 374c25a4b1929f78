"""
``geniter``
===========

Provides adapters exposing resumable computations, which yield items
and finally return a value, through Python's iterator protocol. The
return value can be captured and read once the iterator is exhausted.
"""
from ._version import __version__
from . import adapter
from . import base
from . import generator
from .adapter import ResultCapture, StepAdapter
from .base import Complete, Generator, Yielded
from .generator import (
    NativeGenerator,
    gen_iter,
    gen_iter_return,
    iter_generator,
    iter_generator_return,
)


__all__ = [
    "__version__",
    "adapter",
    "base",
    "generator",
    "StepAdapter",
    "ResultCapture",
    "Generator",
    "Yielded",
    "Complete",
    "NativeGenerator",
    "gen_iter",
    "gen_iter_return",
    "iter_generator",
    "iter_generator_return",
]
