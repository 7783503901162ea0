"""
Row-identity keys.

Every row entering the engine gets a stable integer key (1..n). The key
lives outside the caller's columns: packs see a copy of the data whose
index is the key, and pandas carries that index through filtering,
sorting and element-wise transforms, so surviving rows can be traced
back to the rows they came from.
"""

import logging
from typing import Optional, Tuple

import pandas as pd

from .errors import RowKeyMismatch

KEY_NAME = '.id'

logger = logging.getLogger('rulepack.keys')


def generate_keys(n_rows: int) -> pd.Index:
    """Generate sequential row keys starting at 1."""
    return pd.Index(range(1, n_rows + 1), name=KEY_NAME)


def key(data: pd.DataFrame, keys: Optional[pd.Index] = None) -> Tuple[pd.DataFrame, pd.Index]:
    """
    Return the data together with its row keys.

    Existing keys from a previous call are reused unchanged. They must
    still fit the data: same length and no duplicates.

    Raises:
        RowKeyMismatch: If ``keys`` is given but does not match ``data``.
    """
    if keys is None:
        keys = generate_keys(len(data))
        logger.debug("Generated %d row keys", len(keys))
        return data, keys

    if len(keys) != len(data):
        raise RowKeyMismatch(
            f"tracked row keys cover {len(keys)} rows but data has {len(data)}"
        )
    if not keys.is_unique:
        raise RowKeyMismatch("tracked row keys are not unique")
    return data, keys


def keyed_view(data: pd.DataFrame, keys: pd.Index) -> pd.DataFrame:
    """
    Copy of ``data`` indexed by row keys, as handed to pack bodies.

    Any index the caller set on the data is replaced, so the key is the
    only row identity a pack sees.
    """
    view = data.copy()
    view.index = keys.rename(KEY_NAME)
    return view
