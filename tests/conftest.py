# tests/conftest.py
import random
import sys
from pathlib import Path

import pytest

# Add project root to sys.path so "colorme" can be imported without installing
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def plus_grid():
    """3x3, 3 colors: two center clicks from here win."""
    return [[0, 1, 0],
            [1, 1, 1],
            [0, 1, 0]]
