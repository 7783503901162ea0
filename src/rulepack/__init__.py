"""
rulepack: expose tabular data to rule packs.

Applies rule packs to a pandas DataFrame and normalizes their outputs,
whatever their shape, into one report attached to the data.
"""

from .actions import act_after_exposure, any_breaker, assert_any_breaker
from .classify import classify
from .engine import ExposureEngine, expose
from .errors import (
    AmbiguousPackType,
    DuplicatePackName,
    ExposureError,
    InvalidSeparator,
    MalformedPackResult,
    NoExposure,
    NonLogicalRuleResult,
    PackError,
    PackExecutionError,
    RowKeyMismatch,
    RuleViolation,
)
from .exposure import ALL, ALL_ROWS, Exposure, PackInfo, ReportRow, bind_exposures
from .frame import (
    ExposedFrame,
    get_exposure,
    get_packs_info,
    get_report,
    remove_exposure,
    set_exposure,
)
from .keys import KEY_NAME, key
from .normalize import normalize
from .packs import (
    Pack,
    PackType,
    cell_packs,
    col_packs,
    data_packs,
    flatten_packs,
    group_packs,
    row_packs,
)
from .separator import (
    DEFAULT_MARKER,
    DEFAULT_RULE_SEP,
    compose_rule_name,
    inside_punct,
    literal_sep,
    parse_rule_name,
)

__version__ = '0.1.0'
