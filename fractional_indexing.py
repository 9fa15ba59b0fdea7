"""
Fractional Indexing for CRDT-compatible list ordering.

Positions are base-79 fractions rendered as text (see base79). The alphabet
runs '+' through 'y' in ASCII order, so positions sort correctly by plain
byte comparison. Requires COLLATE "C" on a database column storing them.

Unlike the raw averages in base79, every position generated here lies
strictly between its neighbours: when the truncated average lands on a
bound, one more digit of precision is requested.
"""

import logging
from typing import List, Optional

from base79 import (
    ZERO,
    Base79,
    Base79Error,
    average,
    average_with_lower_bound,
    average_with_upper_bound,
    mid,
    parse,
    render,
)

logger = logging.getLogger(__name__)

START_CHAR = render(mid())  # 'R', the middle of the alphabet


def _average(lower: Optional[Base79], upper: Optional[Base79], precision: Optional[int]) -> Base79:
    if lower is None:
        return average_with_lower_bound(upper, precision=precision)
    if upper is None:
        return average_with_upper_bound(lower, precision=precision)
    return average(lower, upper, precision=precision)


def _is_between(candidate: Base79, lower: Optional[Base79], upper: Optional[Base79]) -> bool:
    floor = lower if lower is not None else ZERO
    return floor < candidate and (upper is None or candidate < upper)


def _between(lower: Optional[Base79], upper: Optional[Base79]) -> Base79:
    """Number strictly between lower and upper, None standing for 0 and 1."""
    if lower is None and upper is None:
        return mid()

    candidate = _average(lower, upper, None)
    if _is_between(candidate, lower, upper):
        return candidate

    # One extra digit is always enough: the truncation error drops below
    # half the smallest gap the inputs can have.
    precision = max(len(lower) if lower is not None else 0, len(upper) if upper is not None else 0) + 1
    logger.debug(f"Average of {lower!r} and {upper!r} hit a bound, extending to {precision} digits")
    candidate = _average(lower, upper, precision)
    assert _is_between(candidate, lower, upper), f"no key between {lower!r} and {upper!r}"
    return candidate


def generate_position_between(
    before: Optional[str],
    after: Optional[str]
) -> str:
    """
    Generate a position strictly between two existing positions.

    Examples:
        >>> generate_position_between(None, None)
        'R'
        >>> generate_position_between(None, 'R')
        '>'
        >>> generate_position_between('R', None)
        'f'
        >>> generate_position_between('R', 'S')
        'RR'  (adjacent, so one more digit)

    Args:
        before: Position to come after, or None/"" for the start of the list
        after: Position to come before, or None/"" for the end of the list

    Raises:
        ValueError: If before >= after, or either position is malformed
    """
    lower = parse(before) if before else None
    upper = parse(after) if after else None

    if lower is not None and upper is not None and lower >= upper:
        raise ValueError(f"Invalid ordering: before='{before}' must be < after='{after}'")

    position = render(_between(lower, upper))
    logger.debug(f"Generated position {position!r} between {before!r} and {after!r}")
    return position


def generate_append_position(last_position: Optional[str]) -> str:
    """
    Generate a position for appending to the end of a list.

    Examples:
        >>> generate_append_position(None)
        'R'
        >>> generate_append_position('R')
        'f'
        >>> generate_append_position('y')
        'yR'
    """
    return generate_position_between(last_position, None)


def generate_prepend_position(first_position: Optional[str]) -> str:
    """Generate a position for inserting at the start of a list."""
    return generate_position_between(None, first_position)


def generate_positions_between(
    before: Optional[str],
    after: Optional[str],
    count: int
) -> List[str]:
    """
    Generate count ascending positions between before and after.

    Positions are filled by bisection rather than one after another, so a
    bulk paste of n items grows keys by about log2(n) / log2(79) digits
    instead of one digit per item.
    """
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    if count == 0:
        return []

    middle = generate_position_between(before, after)
    left_count = (count - 1) // 2
    return (
        generate_positions_between(before, middle, left_count)
        + [middle]
        + generate_positions_between(middle, after, count - 1 - left_count)
    )


def validate_position(position: str) -> bool:
    """Check if a position string is a valid, canonical, non-empty key."""
    if not position or not isinstance(position, str):
        return False
    try:
        parse(position)
    except Base79Error:
        return False
    return True
