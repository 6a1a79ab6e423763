"""Single lookup shared by the tax, CO2 and registration tables."""
from __future__ import annotations
from typing import Optional, Protocol, Sequence, TypeVar


class Bracket(Protocol):
    @property
    def lower(self) -> float: ...

    @property
    def upper(self) -> float: ...


B = TypeVar("B", bound=Bracket)


def check_contiguous(brackets: Sequence[Bracket]) -> None:
    """Raise ValueError if the table is empty, unordered or overlapping.

    Integer-bounded tables are contiguous when the next bracket starts one
    unit above the previous maximum.
    """
    if not brackets:
        raise ValueError("Empty bracket table")
    for prev, nxt in zip(brackets, brackets[1:]):
        if nxt.lower <= prev.upper:
            raise ValueError(f"Overlapping brackets: {prev!r} / {nxt!r}")
        if nxt.lower - prev.upper > 1:
            raise ValueError(f"Gap between brackets: {prev!r} / {nxt!r}")


def find_bracket(value: float, brackets: Sequence[B]) -> Optional[B]:
    """First bracket whose upper bound is >= value, scanning in ascending order.

    Tables are ordered and contiguous, so this is the bracket whose
    ``[lower, upper]`` range holds ``value``; fractional values falling between
    two integer bounds land in the upper bracket. Returns None past the last
    bracket, or below the first bracket's explicit minimum.
    """
    if not brackets or value < brackets[0].lower:
        return None
    for bracket in brackets:
        if value <= bracket.upper:
            return bracket
    return None
