"""
Result normalization.

Converts a pack output of any of the five shapes into report rows of
one schema: (pack, rule, variable, row_id, verdict). Rows are emitted
column by column in the output's column order, and within a column in
the output's row order.
"""

from typing import Any, List, Optional, Sequence, Tuple

import pandas as pd

from .classify import as_frame, rule_columns
from .errors import MalformedPackResult, NonLogicalRuleResult
from .exposure import ALL, ALL_ROWS, ReportRow
from .keys import KEY_NAME
from .packs import PackType
from .separator import DEFAULT_RULE_SEP, Separator, compile_separator, parse_rule_name


def _is_missing(value: Any) -> bool:
    return pd.api.types.is_scalar(value) and pd.isna(value)


def to_verdicts(values: pd.Series, pack_name: str, column: str) -> List[bool]:
    """
    Turn rule outcomes (True = obeyed) into verdicts (True = broken).

    Missing outcomes count as broken.

    Raises:
        NonLogicalRuleResult: If the column holds anything but booleans
            and missing values.
    """
    if not pd.api.types.is_bool_dtype(values.dtype):
        logical = values.dtype == object and all(
            pd.api.types.is_bool(v) or _is_missing(v) for v in values
        )
        if not logical:
            raise NonLogicalRuleResult(
                f"rule column {column!r} of pack {pack_name!r} is not logical "
                f"(dtype {values.dtype})",
                pack_name=pack_name,
                column=column,
            )
    return [True if _is_missing(v) else not bool(v) for v in values]


def _row_ids(frame: pd.DataFrame, pack_name: str, keys: Optional[pd.Index]) -> List[int]:
    if KEY_NAME in frame.columns:
        ids = frame[KEY_NAME]
    elif frame.index.name == KEY_NAME:
        ids = frame.index.to_series()
    else:
        raise MalformedPackResult(
            f"pack {pack_name!r} output has no {KEY_NAME!r} row key", pack_name=pack_name
        )

    if keys is not None:
        unknown = ids[~ids.isin(keys)]
        if len(unknown):
            raise MalformedPackResult(
                f"pack {pack_name!r} output has unknown row keys: {list(unknown.iloc[:5])}",
                pack_name=pack_name,
            )
    return [int(i) for i in ids]


def _require_one_row(frame: pd.DataFrame, pack_type: PackType, pack_name: str) -> None:
    if len(frame) != 1:
        raise MalformedPackResult(
            f"{pack_type.value} pack {pack_name!r} must return one row, got {len(frame)}",
            pack_name=pack_name,
        )


def _split(column: Any, sep: Separator) -> Tuple[str, str]:
    parsed = parse_rule_name(str(column), sep)
    return parsed if parsed is not None else (str(column), ALL)


def _group_labels(frame: pd.DataFrame, group_vars: Sequence[str], group_sep: str,
                  pack_name: str) -> Tuple[pd.DataFrame, List[str]]:
    index_names = [n for n in frame.index.names if n is not None]
    # a grouping variable already present as a column wins over its index level
    in_index = [g for g in group_vars if g in index_names and g not in frame.columns]
    if in_index:
        frame = frame.reset_index(level=in_index)

    missing = [g for g in group_vars if g not in frame.columns]
    if missing:
        raise MalformedPackResult(
            f"grouped pack {pack_name!r} output lacks grouping variables {missing}",
            pack_name=pack_name,
        )

    labels = [
        group_sep.join(str(v) for v in values)
        for values in frame[list(group_vars)].itertuples(index=False, name=None)
    ]
    return frame, labels


def normalize(
    raw_result: Any,
    pack_type: PackType,
    pack_name: str,
    rule_sep: Separator = DEFAULT_RULE_SEP,
    group_vars: Sequence[str] = (),
    group_sep: str = '.',
    keys: Optional[pd.Index] = None,
) -> List[ReportRow]:
    """
    Normalize one pack output into report rows.

    Args:
        raw_result: The pack's output.
        pack_type: Declared or inferred pack type.
        pack_name: Name recorded on every report row.
        rule_sep: Separator splitting composite column/cell rule names.
        group_vars: Grouping variables of a grouped pack, in declared order.
        group_sep: Joins a group's key values into a variable name.
        keys: Row keys of the exposed data; row ids must come from these.

    Raises:
        MalformedPackResult: Output shape does not fit ``pack_type``.
        NonLogicalRuleResult: A rule column is not boolean.
    """
    sep = compile_separator(rule_sep)
    frame = as_frame(raw_result)
    rows: List[ReportRow] = []

    if pack_type is PackType.WHOLE:
        _require_one_row(frame, pack_type, pack_name)
        for col in rule_columns(frame):
            (verdict,) = to_verdicts(frame[col], pack_name, str(col))
            rows.append(ReportRow(pack_name, str(col), ALL, ALL_ROWS, verdict, pack_type))

    elif pack_type is PackType.COLUMN:
        _require_one_row(frame, pack_type, pack_name)
        for col in rule_columns(frame):
            rule, var = _split(col, sep)
            (verdict,) = to_verdicts(frame[col], pack_name, str(col))
            rows.append(ReportRow(pack_name, rule, var, ALL_ROWS, verdict, pack_type))

    elif pack_type is PackType.GROUPED:
        frame, labels = _group_labels(frame, group_vars, group_sep, pack_name)
        for col in rule_columns(frame):
            if col in group_vars:
                continue
            verdicts = to_verdicts(frame[col], pack_name, str(col))
            rows.extend(
                ReportRow(pack_name, str(col), label, ALL_ROWS, verdict, pack_type)
                for label, verdict in zip(labels, verdicts)
            )

    elif pack_type in (PackType.ROW, PackType.CELL):
        ids = _row_ids(frame, pack_name, keys)
        for col in rule_columns(frame):
            if pack_type is PackType.CELL:
                rule, var = _split(col, sep)
            else:
                rule, var = str(col), ALL
            verdicts = to_verdicts(frame[col], pack_name, str(col))
            rows.extend(
                ReportRow(pack_name, rule, var, row_id, verdict, pack_type)
                for row_id, verdict in zip(ids, verdicts)
            )

    else:
        raise MalformedPackResult(f"unknown pack type {pack_type!r}", pack_name=pack_name)

    return rows
