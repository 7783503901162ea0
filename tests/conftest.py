"""Shared test fixtures and path setup."""
import sys
from pathlib import Path

# Add src/ to sys.path so tests can import rulepack without installing
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

import pytest
import pandas as pd


@pytest.fixture
def cars_df():
    """Motor Trend road tests: 32 cars."""
    return pd.DataFrame({
        'mpg': [21.0, 21.0, 22.8, 21.4, 18.7, 18.1, 14.3, 24.4, 22.8, 19.2, 17.8, 16.4,
                17.3, 15.2, 10.4, 10.4, 14.7, 32.4, 30.4, 33.9, 21.5, 15.5, 15.2, 13.3,
                19.2, 27.3, 26.0, 30.4, 15.8, 19.7, 15.0, 21.4],
        'cyl': [6, 6, 4, 6, 8, 6, 8, 4, 4, 6, 6, 8, 8, 8, 8, 8,
                8, 4, 4, 4, 4, 8, 8, 8, 8, 4, 4, 4, 8, 6, 8, 4],
        'gear': [4, 4, 4, 3, 3, 3, 3, 4, 4, 4, 4, 3, 3, 3, 3, 3,
                 3, 4, 4, 4, 3, 3, 3, 3, 3, 4, 5, 5, 5, 5, 5, 4],
        'am': [1, 1, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0,
               0, 1, 1, 1, 0, 0, 0, 0, 0, 1, 1, 1, 1, 1, 1, 1],
    })


@pytest.fixture
def small_df():
    """Five rows with a caller-defined index and some negative values."""
    return pd.DataFrame(
        {
            'x': [1, -2, 3, -4, 5],
            'y': [10, 20, -30, 40, 50],
            'g': ['a', 'a', 'b', 'b', 'b'],
        },
        index=pd.Index(['r1', 'r2', 'r3', 'r4', 'r5'], name='code'),
    )


@pytest.fixture
def keyed_small(small_df):
    """small_df as a pack sees it: indexed by row keys 1..5."""
    from rulepack.keys import generate_keys, keyed_view
    return keyed_view(small_df, generate_keys(len(small_df)))
