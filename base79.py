"""
Base-79 fractional numbers for ordering keys.

A Base79 value is a number in [0, 1) written as base-79 digits with the
leading "0." left off, most significant digit first. "R" is 39/79, "R5" is
39/79 + 10/79^2, and the empty string is zero.

Why 79? ASCII has 95 printable characters. The alphabet takes the middle 79
('+' through 'y'), leaving out the space and the quote marks, which are hard to
read or need escaping. Every character is one byte in UTF-8, and the alphabet
runs in ASCII order, so rendered keys sort correctly by plain byte comparison
(COLLATE "C" in PostgreSQL).

Averages are deliberately imprecise: the result is truncated to the length of
the longer input, trading exactness for short keys. Pass ``precision`` to ask
for more digits.

Trailing zero digits are never stored: "R+" and "R" are the same number, so
results drop them and parse() rejects text ending in '+' with
NonCanonicalInput. Keys written elsewhere with a trailing '+' fail
validation and have to be rewritten without it. Leading zero digits are
real place values and are kept ("+R" is 39/79^2).

Example:
    >>> render(mid())
    'R'
    >>> render(average_with_lower_bound(mid()))
    '>'
    >>> render(average_with_upper_bound(mid()))
    'f'
    >>> parse("s?Q^Z").raw_digits()
    [72, 20, 38, 51, 47]
"""

from functools import total_ordering
from typing import Iterable, List, Optional, Tuple

BASE = 79
MINIMUM_CHAR = "+"

# '+' (0x2B) through 'y' (0x79), in ASCII order
ALPHABET = "".join(chr(ord(MINIMUM_CHAR) + i) for i in range(BASE))
MIDPOINT = BASE // 2  # 39, which is 'R'

_DIGIT_BY_CHAR = {char: digit for digit, char in enumerate(ALPHABET)}


class Base79Error(ValueError):
    """Raised when text cannot be decoded into a Base79 number."""


class InvalidDigitCharacter(Base79Error):
    """A character outside the 79-character alphabet."""

    def __init__(self, char: str, position: int):
        self.char = char
        self.position = position
        super().__init__(f"Invalid base-79 digit {char!r} at position {position}")


class NonCanonicalInput(Base79Error):
    """Text made of valid digits that is not the canonical form of its value."""

    def __init__(self, text: str, reason: str):
        self.text = text
        self.reason = reason
        super().__init__(f"Non-canonical base-79 text {text!r}: {reason}")


def char_of(digit: int) -> str:
    """Convert digit value (0-78) to alphabet character."""
    assert 0 <= digit < BASE, f"digit out of range: {digit}"
    return ALPHABET[digit]


def digit_of(char: str, position: int = 0) -> int:
    """
    Convert alphabet character to digit value (0-78).

    Args:
        char: A single character
        position: Where the character sits in its text, for error reporting

    Raises:
        InvalidDigitCharacter: If char is not in the alphabet
    """
    try:
        return _DIGIT_BY_CHAR[char]
    except KeyError:
        raise InvalidDigitCharacter(char, position) from None


def _padded(digits: Tuple[int, ...], length: int) -> Tuple[int, ...]:
    """Right-pad with zero digits; the value is unchanged."""
    if len(digits) >= length:
        return digits
    return digits + (0,) * (length - len(digits))


def _canonical(digits: List[int]) -> Tuple[int, ...]:
    # Trailing zero digits add nothing to a fraction; an all-zero list is zero.
    end = len(digits)
    while end and digits[end - 1] == 0:
        end -= 1
    return tuple(digits[:end])


@total_ordering
class Base79:
    """
    Immutable fractional number in [0, 1) with base-79 digits.

    Constructing from raw digits is the caller's responsibility: every digit
    must be an int in [0, 78]. Trailing zero digits are dropped, so
    ``Base79([39, 0]) == Base79([39])`` and ``Base79([0])`` is zero.
    """

    __slots__ = ("_digits",)

    def __init__(self, digits: Iterable[int] = ()):
        digits = list(digits)
        for digit in digits:
            assert isinstance(digit, int) and 0 <= digit < BASE, f"digit out of range: {digit!r}"
        object.__setattr__(self, "_digits", _canonical(digits))

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __reduce__(self):
        # copy and pickle would otherwise restore the slot through __setattr__
        return (Base79, (self._digits,))

    @property
    def digits(self) -> Tuple[int, ...]:
        return self._digits

    def raw_digits(self) -> List[int]:
        return list(self._digits)

    def is_zero(self) -> bool:
        return not self._digits

    def __len__(self) -> int:
        return len(self._digits)

    def __eq__(self, other):
        if not isinstance(other, Base79):
            return NotImplemented
        return self._digits == other._digits

    def __lt__(self, other):
        if not isinstance(other, Base79):
            return NotImplemented
        length = max(len(self._digits), len(other._digits))
        return _padded(self._digits, length) < _padded(other._digits, length)

    def __hash__(self):
        return hash(self._digits)

    def __str__(self):
        return render(self)

    def __repr__(self):
        return f"Base79({render(self)!r})"


ZERO = Base79()
_MID = Base79([MIDPOINT])


def parse(text: str) -> Base79:
    """
    Decode text into a Base79 number.

    The empty string is zero. Text is never repaired: a trailing zero digit
    ('+') would give a second spelling of a shorter key, so it is rejected.

    Raises:
        InvalidDigitCharacter: At the first character outside the alphabet
        NonCanonicalInput: If the text ends with the zero digit
    """
    if not isinstance(text, str):
        raise TypeError(f"Expected str, got {type(text).__name__}")
    digits = [digit_of(char, position) for position, char in enumerate(text)]
    if digits and digits[-1] == 0:
        raise NonCanonicalInput(text, f"ends with zero digit {ALPHABET[0]!r}")
    return Base79(digits)


def render(number: Base79) -> str:
    """Encode a Base79 number as text; zero renders as the empty string."""
    return "".join(char_of(digit) for digit in number.digits)


def mid() -> Base79:
    """The middle of the unit interval, 'R'. The usual first key of a list."""
    return _MID


def _add(a: Tuple[int, ...], b: Tuple[int, ...], length: int) -> Tuple[List[int], bool]:
    """
    Add two digit sequences padded to length, right to left with carry.

    Returns:
        Tuple of (fractional digits, overflow) where overflow means the sum
        has an integer part of 1
    """
    a = _padded(a, length)
    b = _padded(b, length)
    total = [0] * length
    carry = 0
    for k in range(length - 1, -1, -1):
        s = a[k] + b[k] + carry
        if s >= BASE:
            total[k] = s - BASE
            carry = 1
        else:
            total[k] = s
            carry = 0
    return total, carry == 1


def _halve(digits: List[int], overflow: bool) -> List[int]:
    """Divide by two left to right; the final remainder is discarded."""
    remainder = 1 if overflow else 0
    result = []
    for digit in digits:
        value = remainder * BASE + digit
        result.append(value // 2)
        remainder = value % 2
    return result


def _result_length(a: Base79, b: Optional[Base79], precision: Optional[int]) -> int:
    if precision is not None and precision < 0:
        raise ValueError(f"precision must be non-negative, got {precision}")
    # At least one digit, so that (0 + 1) / 2 does not truncate to nothing.
    return max(len(a), len(b) if b is not None else 0, precision or 0, 1)


def _halved_sum(a: Base79, b: Optional[Base79], precision: Optional[int]) -> Base79:
    """(a + b) / 2, where b=None stands for the upper bound 1."""
    length = _result_length(a, b, precision)
    if b is None:
        # a < 1, so a + 1 is a's digits with an integer part of exactly 1
        total, overflow = list(_padded(a.digits, length)), True
    else:
        total, overflow = _add(a.digits, b.digits, length)
    return Base79(_halve(total, overflow))


def average(a: Base79, b: Base79, precision: Optional[int] = None) -> Base79:
    """
    Average of two numbers, truncated to the longer input's length.

    Commutative, and ``average(a, a) == a``. When a and b are adjacent at
    that length the result can equal one of them; pass a larger precision
    to get a value strictly between.

    Args:
        a: First number
        b: Second number
        precision: Number of digits to compute; never fewer than the inputs have
    """
    return _halved_sum(a, b, precision)


def average_with_lower_bound(a: Base79, precision: Optional[int] = None) -> Base79:
    """Average of a and 0."""
    return _halved_sum(a, ZERO, precision)


def average_with_upper_bound(a: Base79, precision: Optional[int] = None) -> Base79:
    """Average of a and 1."""
    return _halved_sum(a, None, precision)
