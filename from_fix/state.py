"""
Per-pipeline mutable state: the datum and lever-arm latches and the heading cell.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Generic, Optional, TypeVar, Union

from common.types import Datum, HeadingSample, LeverArm


T = TypeVar("T")


class AlreadyLatchedError(RuntimeError):
    """Raised when a latch that already holds a value is set again."""


class Unlatched:
    """Latch state before the first value arrives."""
    __slots__ = ()

    def __repr__(self) -> str:
        return "Unlatched"


UNLATCHED = Unlatched()


@dataclass(frozen=True, slots=True)
class Latched(Generic[T]):
    value: T


class Latch(Generic[T]):
    """
    First-value-wins cell. The only transition is Unlatched -> Latched(value).

    Usage:
        datum: Latch[Datum] = Latch()
        if not datum.is_set:
            datum.set(Datum(...))
        d = datum.value
    """

    __slots__ = ("_state",)

    def __init__(self) -> None:
        self._state: Union[Unlatched, Latched[T]] = UNLATCHED

    @property
    def state(self) -> Union[Unlatched, Latched[T]]:
        return self._state

    @property
    def is_set(self) -> bool:
        return isinstance(self._state, Latched)

    @property
    def value(self) -> T:
        if not isinstance(self._state, Latched):
            raise LookupError("latch is not set")
        return self._state.value

    def get(self, default: Optional[T] = None) -> Optional[T]:
        return self._state.value if isinstance(self._state, Latched) else default

    def set(self, value: T) -> T:
        if isinstance(self._state, Latched):
            raise AlreadyLatchedError(f"latch already holds {self._state.value!r}")
        self._state = Latched(value)
        return value

    def __repr__(self) -> str:
        return f"Latch({self._state!r})"


class HeadingCell:
    """Latest heading sample; overwritten on every update, no history."""

    __slots__ = ("_sample",)

    def __init__(self) -> None:
        self._sample: Optional[HeadingSample] = None

    def update(self, sample: HeadingSample) -> None:
        self._sample = sample

    @property
    def latest(self) -> Optional[HeadingSample]:
        return self._sample

    @property
    def received(self) -> bool:
        return self._sample is not None


@dataclass
class Session:
    """Everything a FromFixPipeline remembers between callbacks."""
    datum: Latch[Datum] = field(default_factory=Latch)
    lever_arm: Latch[LeverArm] = field(default_factory=Latch)
    heading: HeadingCell = field(default_factory=HeadingCell)
    stats: Counter = field(default_factory=Counter)
