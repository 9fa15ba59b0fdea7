"""
Test configuration and fixtures shared by the unit and functional suites.
"""

import os
import sys
import random
import pytest

# Add project root to Python path so we can import app modules
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from base79 import Base79, mid


@pytest.fixture
def rng():
    """Seeded random generator so failures are reproducible."""
    return random.Random(20240601)


@pytest.fixture
def sample_numbers(rng):
    """A spread of numbers: zero, mid, short, long, and extreme digits."""
    numbers = [
        Base79(),
        mid(),
        Base79([1]),
        Base79([78]),
        Base79([0, 1]),
        Base79([78, 78, 78]),
        Base79([39, 39]),
        Base79([72, 20, 38, 51, 47]),
    ]
    for _ in range(20):
        length = rng.randint(1, 6)
        numbers.append(Base79([rng.randint(0, 78) for _ in range(length)]))
    return numbers

