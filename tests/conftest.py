"""Pytest configuration and shared fixtures."""

import pytest
import sys
from pathlib import Path

import numpy as np

# Add the source directory to the Python path
root_dir = Path(__file__).parent.parent
sys.path.insert(0, str(root_dir / "src"))


@pytest.fixture
def rng():
    """A seeded random generator, so every test is reproducible."""
    return np.random.default_rng(42)


@pytest.fixture
def xor_dataset():
    """The XOR truth table."""
    return [
        {"input": [0, 0], "output": [0]},
        {"input": [0, 1], "output": [1]},
        {"input": [1, 0], "output": [1]},
        {"input": [1, 1], "output": [0]},
    ]


@pytest.fixture
def and_dataset():
    """The AND truth table."""
    return [
        {"input": [0, 0], "output": [0]},
        {"input": [0, 1], "output": [0]},
        {"input": [1, 0], "output": [0]},
        {"input": [1, 1], "output": [1]},
    ]
