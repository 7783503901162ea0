"""
Pack type inference.

When a pack does not declare its type, the type is read off the pack's
output using a fixed precedence of structural checks:

1. grouping variables were declared             -> grouped
2. the row key is present, composite rule names -> cell
3. the row key is present                       -> row
4. composite rule names                         -> column
5. a single row                                 -> whole

Anything else is ambiguous.
"""

from typing import Any, Optional, Sequence

import pandas as pd

from .errors import AmbiguousPackType, MalformedPackResult
from .keys import KEY_NAME
from .packs import PackType
from .separator import DEFAULT_RULE_SEP, Separator, compile_separator, is_composite


def as_frame(raw: Any) -> pd.DataFrame:
    """
    Coerce a pack's raw output to a DataFrame.

    A dict of scalars becomes a one-row frame. A Series indexed by the
    row key becomes a one-column frame; any other Series is read as one
    row whose labels are column names.

    Raises:
        MalformedPackResult: Unsupported output type, or duplicate
            column names.
    """
    if isinstance(raw, pd.DataFrame):
        frame = raw
    elif isinstance(raw, dict):
        frame = pd.DataFrame([raw])
    elif isinstance(raw, pd.Series):
        if raw.index.name == KEY_NAME:
            if raw.name is None:
                raise MalformedPackResult("per-row Series output needs a name to use as the rule name")
            frame = raw.to_frame()
        else:
            frame = raw.to_frame().T.reset_index(drop=True)
    else:
        raise MalformedPackResult(
            f"pack output must be a DataFrame, Series or dict, got {type(raw).__name__}"
        )

    if not frame.columns.is_unique:
        duplicated = sorted({str(c) for c in frame.columns[frame.columns.duplicated()]})
        raise MalformedPackResult(f"pack output has duplicate column names: {duplicated}")
    return frame


def has_row_id(frame: pd.DataFrame) -> bool:
    return frame.index.name == KEY_NAME or KEY_NAME in frame.columns


def rule_columns(frame: pd.DataFrame) -> list:
    """Result columns holding rule outcomes (everything but the row key)."""
    return [col for col in frame.columns if col != KEY_NAME]


def classify(
    raw_result: Any,
    declared_type: Optional[PackType] = None,
    group_vars: Sequence[str] = (),
    rule_sep: Separator = DEFAULT_RULE_SEP,
    guess: bool = True,
) -> PackType:
    """
    Determine the type of a pack result.

    Args:
        raw_result: The pack's output.
        declared_type: Type declared on the pack, returned as is when set.
        group_vars: Grouping variables declared on the pack.
        rule_sep: Separator used to recognise composite rule names.
        guess: Whether inference is allowed for undeclared types.

    Raises:
        AmbiguousPackType: Type undeclared and guessing disabled, or the
            output matches none of the structural signals.
    """
    if declared_type is not None:
        return declared_type
    if not guess:
        raise AmbiguousPackType("pack type is not declared and guessing is disabled")
    if group_vars:
        return PackType.GROUPED

    sep = compile_separator(rule_sep)
    frame = as_frame(raw_result)
    composite = any(is_composite(col, sep) for col in rule_columns(frame))

    if has_row_id(frame):
        return PackType.CELL if composite else PackType.ROW
    if composite:
        return PackType.COLUMN
    if len(frame) == 1:
        return PackType.WHOLE

    raise AmbiguousPackType(
        f"cannot infer pack type from a {len(frame)}-row output "
        f"without row key, grouping variables or composite rule names"
    )
