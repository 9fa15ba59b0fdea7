"""
Unit tests for fractional indexing module.

Tests the position generation algorithms used for CRDT-compatible list ordering.
Uses the base-79 alphabet ('+' through 'y'), which sorts correctly with COLLATE "C".
"""

import logging

import pytest

from base79 import InvalidDigitCharacter, NonCanonicalInput, render
from fractional_indexing import (
    generate_append_position,
    generate_position_between,
    generate_positions_between,
    generate_prepend_position,
    validate_position,
    START_CHAR,
)


class TestGenerateAppendPosition:
    """Tests for generate_append_position function."""

    def test_append_to_empty_list(self):
        """First position in empty list starts at 'R'."""
        assert START_CHAR == "R"
        assert generate_append_position(None) == "R"
        assert generate_append_position("") == "R"

    def test_append_averages_with_one(self):
        """Appending moves halfway towards the upper bound."""
        assert generate_append_position("R") == "f"
        assert generate_append_position("f") == "p"
        assert generate_append_position("p") == "u"

    def test_append_at_y_extends(self):
        """'y' is the largest digit, so the next key needs a second digit."""
        assert generate_append_position("y") == "yR"
        assert generate_append_position("yy") == "yyR"

    def test_append_sequence(self):
        """Repeated appends stay sorted and grow one digit every few keys."""
        positions = []
        pos = None
        for _ in range(100):
            pos = generate_append_position(pos)
            positions.append(pos)

        # R f p u w x y, then the next level starts at yR
        assert all(len(p) == 1 for p in positions[:7])
        assert positions[6] == "y"
        assert positions[7] == "yR"

        assert positions == sorted(positions)
        assert len(set(positions)) == len(positions)


class TestGeneratePrependPosition:
    """Tests for generate_prepend_position function."""

    def test_prepend_averages_with_zero(self):
        """Prepending moves halfway towards zero."""
        assert generate_prepend_position(None) == "R"
        assert generate_prepend_position("R") == ">"

    def test_prepend_below_smallest_digit(self):
        """Keys below 1/79 carry leading zero digits."""
        assert generate_prepend_position(",") == "+R"
        assert generate_prepend_position("+,") == "++R"

    def test_prepend_sequence(self):
        """Repeated prepends stay sorted and never reach zero."""
        positions = []
        pos = None
        for _ in range(60):
            pos = generate_prepend_position(pos)
            positions.append(pos)

        assert positions == sorted(positions, reverse=True)
        assert len(set(positions)) == len(positions)
        for p in positions:
            assert validate_position(p), f"Invalid position: {p}"


class TestGeneratePositionBetween:
    """Tests for generate_position_between function."""

    def test_between_none_and_none(self):
        """Both None returns start char."""
        assert generate_position_between(None, None) == "R"
        assert generate_position_between("", "") == "R"

    def test_open_bounds(self):
        """None on one side means the start or end of the list."""
        assert generate_position_between(None, "R") == ">"
        assert generate_position_between("R", None) == "f"

    def test_insert_between_with_gap(self):
        """Insert between positions with a gap uses the average."""
        assert generate_position_between(">", "R") == "H"
        assert generate_position_between("R", "RR") == "R>"

    def test_insert_between_adjacent(self):
        """Insert between adjacent positions extends by one digit."""
        result = generate_position_between("R", "S")
        assert result == "RR"
        assert "R" < result < "S"

    def test_extension_is_logged(self, caplog):
        """Extending precision for adjacent keys is logged at DEBUG."""
        with caplog.at_level(logging.DEBUG, logger="fractional_indexing"):
            assert generate_position_between("R", "S") == "RR"
        assert any(
            record.levelno == logging.DEBUG and "extending to 2 digits" in record.getMessage()
            for record in caplog.records
        )

    def test_no_extension_logged_with_room(self, caplog):
        """A plain average does not log an extension."""
        with caplog.at_level(logging.DEBUG, logger="fractional_indexing"):
            generate_position_between(">", "R")
        assert not any("extending" in record.getMessage() for record in caplog.records)

    def test_insert_produces_sorted_result(self):
        """Inserted position is always between before and after."""
        test_cases = [
            ("+,", "y"),
            ("R", "S"),
            ("RR", "RS"),
            ("+,", "+-"),
            ("yx", "yy"),
            ("R", "R,"),
            ("s?Q^Z", "s?Q^["),
            ("f", "y"),
        ]
        for before, after in test_cases:
            result = generate_position_between(before, after)
            assert before < result < after, f"Failed for ({before}, {after}): got {result}"
            assert validate_position(result)

    def test_invalid_ordering_raises(self):
        """Passing before >= after raises ValueError."""
        with pytest.raises(ValueError):
            generate_position_between("f", "R")

        with pytest.raises(ValueError):
            generate_position_between("R", "R")

    def test_malformed_positions_raise(self):
        """Malformed keys are rejected, not repaired."""
        with pytest.raises(InvalidDigitCharacter):
            generate_position_between("R", "R z")

        with pytest.raises(NonCanonicalInput):
            generate_position_between("R+", None)

    def test_repeated_inserts_at_same_point(self):
        """Repeated inserts right after one key stay between the bounds."""
        before = "+,"
        after = "y"

        for _ in range(40):
            new_pos = generate_position_between(before, after)
            assert before < new_pos < after
            # The new position becomes the 'after' bound
            after = new_pos

        # Halving the gap each time costs about one digit per six inserts
        assert len(after) <= 10


class TestGeneratePositionsBetween:
    """Tests for generate_positions_between function."""

    def test_zero_count(self):
        """Zero positions requested gives an empty list."""
        assert generate_positions_between("R", "S", 0) == []

    def test_negative_count_raises(self):
        """Negative counts are rejected."""
        with pytest.raises(ValueError):
            generate_positions_between(None, None, -1)

    def test_single_position(self):
        """One position is the plain midpoint."""
        assert generate_positions_between(None, None, 1) == ["R"]
        assert generate_positions_between("R", None, 1) == ["f"]

    def test_positions_are_sorted_and_bounded(self):
        """Bulk positions are ascending, unique and between the bounds."""
        positions = generate_positions_between("R", "S", 25)
        assert len(positions) == 25
        assert positions == sorted(positions)
        assert len(set(positions)) == 25
        for p in positions:
            assert "R" < p < "S"
            assert validate_position(p)

    def test_bulk_insert_stays_short(self):
        """Bisection keeps a large bulk insert much shorter than appending."""
        positions = generate_positions_between(None, None, 1000)
        assert positions == sorted(positions)
        assert len(set(positions)) == 1000
        assert max(len(p) for p in positions) <= 5

        pos = None
        for _ in range(1000):
            pos = generate_append_position(pos)
        assert len(pos) > 100


class TestValidatePosition:
    """Tests for validate_position function."""

    def test_valid_positions(self):
        """Valid positions return True."""
        assert validate_position("R") is True
        assert validate_position("s?Q^Z") is True
        assert validate_position("+R") is True
        assert validate_position("y") is True
        assert validate_position("ABCxy") is True  # Mixed case is valid

    def test_invalid_positions(self):
        """Invalid positions return False."""
        assert validate_position("") is False
        assert validate_position(None) is False
        assert validate_position("R z") is False  # Space
        assert validate_position("Rz") is False  # Past the end of the alphabet
        assert validate_position("R'") is False  # Quote
        assert validate_position("R+") is False  # Trailing zero digit
        assert validate_position(123) is False


class TestOrderingConsistency:
    """Tests that verify ordering properties critical for CRDT correctness."""

    def test_random_inserts_keep_order(self, rng):
        """Inserting at random slots keeps the list sorted and unique."""
        positions = []
        for _ in range(500):
            index = rng.randint(0, len(positions))
            before = positions[index - 1] if index > 0 else None
            after = positions[index] if index < len(positions) else None
            positions.insert(index, generate_position_between(before, after))

        assert positions == sorted(positions)
        assert len(set(positions)) == len(positions)
        for p in positions:
            assert validate_position(p), f"Invalid position: {p}"

    def test_start_char_is_rendered_mid(self):
        """START_CHAR is the middle of the alphabet."""
        from base79 import mid
        assert START_CHAR == render(mid())
