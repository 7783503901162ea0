"""
Pack definitions.

A pack is a named function from a DataFrame to a result frame holding
boolean rule outcomes (True = rule obeyed). The shape of that frame
falls into one of five pack types. Packs are composable via plain lists
and flattened before exposure.

Usage:
    packs = [
        data_packs(enough_rows=lambda df: {'nrow_gt_10': len(df) > 10}),
        row_packs(lambda df: (df[['mpg']] > 0).rename(columns={'mpg': 'positive_mpg'})),
        group_packs(
            by_cyl=lambda df: df.groupby('cyl').agg(enough=('mpg', lambda s: len(s) > 2)),
            group_vars=['cyl'],
        ),
    ]
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from .separator import Separator


class PackType(Enum):
    """Shape of a pack's result."""
    WHOLE = "whole"       # one row, one outcome per rule for the whole dataset
    GROUPED = "grouped"   # one outcome per rule per group
    COLUMN = "column"     # one row, composite rule/variable columns
    ROW = "row"           # row-id plus one outcome per rule per row
    CELL = "cell"         # row-id plus composite rule/variable columns


PackFunc = Callable[[pd.DataFrame], Any]


@dataclass(frozen=True)
class Pack:
    """
    A rule pack.

    Attributes:
        func: Function applied to the keyed copy of the data.
        name: Pack name. Generated as ``<type>..<n>`` when absent.
        type: Declared pack type. Inferred from the output when absent.
        group_vars: Grouping columns. Supplying them makes the pack grouped.
        group_sep: Separator used to render a group's key values as a
            variable name.
        rule_sep: Rule separator override for this pack.
    """
    func: PackFunc
    name: Optional[str] = None
    type: Optional[PackType] = None
    group_vars: Tuple[str, ...] = ()
    group_sep: str = '.'
    rule_sep: Optional[Separator] = None

    def __post_init__(self):
        if not callable(self.func):
            raise TypeError(f"pack function must be callable, got {type(self.func).__name__}")
        if isinstance(self.group_vars, str):
            object.__setattr__(self, 'group_vars', (self.group_vars,))
        else:
            object.__setattr__(self, 'group_vars', tuple(self.group_vars))
        if self.type is PackType.GROUPED and not self.group_vars:
            raise ValueError("grouped packs need group_vars")
        if self.group_vars and self.type not in (None, PackType.GROUPED):
            raise ValueError(f"group_vars given for a {self.type.value} pack")

    def __call__(self, df: pd.DataFrame) -> Any:
        return self.func(df)

    @property
    def declared_type(self) -> Optional[PackType]:
        if self.type is None and self.group_vars:
            return PackType.GROUPED
        return self.type


def _build(pack_type: PackType, funcs: Sequence[PackFunc], named: dict, **options) -> List[Pack]:
    packs = [Pack(func, type=pack_type, **options) for func in funcs]
    packs.extend(Pack(func, name=name, type=pack_type, **options) for name, func in named.items())
    return packs


def data_packs(*funcs: PackFunc, **named: PackFunc) -> List[Pack]:
    """Whole-dataset packs. Keyword arguments name the pack."""
    return _build(PackType.WHOLE, funcs, named)


def group_packs(*funcs: PackFunc, group_vars: Sequence[str], group_sep: str = '.',
                **named: PackFunc) -> List[Pack]:
    """Grouped packs over ``group_vars``."""
    return _build(PackType.GROUPED, funcs, named, group_vars=tuple(group_vars), group_sep=group_sep)


def col_packs(*funcs: PackFunc, rule_sep: Optional[Separator] = None, **named: PackFunc) -> List[Pack]:
    """Per-column packs. Result columns are composite rule/variable names."""
    return _build(PackType.COLUMN, funcs, named, rule_sep=rule_sep)


def row_packs(*funcs: PackFunc, **named: PackFunc) -> List[Pack]:
    """Per-row packs. Results keep the row key."""
    return _build(PackType.ROW, funcs, named)


def cell_packs(*funcs: PackFunc, rule_sep: Optional[Separator] = None, **named: PackFunc) -> List[Pack]:
    """Per-cell packs. Results keep the row key and use composite names."""
    return _build(PackType.CELL, funcs, named, rule_sep=rule_sep)


def flatten_packs(items: Iterable[Any]) -> List[Pack]:
    """
    Flatten arbitrarily nested lists/tuples of packs into one list.

    Bare callables become untyped, unnamed packs.
    """
    flat: List[Pack] = []
    for item in items:
        if isinstance(item, Pack):
            flat.append(item)
        elif isinstance(item, (list, tuple)):
            flat.extend(flatten_packs(item))
        elif callable(item):
            flat.append(Pack(item))
        else:
            raise TypeError(f"expected a pack, callable or list of packs, got {type(item).__name__}")
    return flat
