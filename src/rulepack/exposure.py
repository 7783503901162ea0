"""
Exposure values.

An Exposure is what applying packs to a dataset produces: one PackInfo
per pack and a flat report of rule verdicts in a single schema,
whatever shape the packs' outputs had. Exposures are immutable;
combining two is plain concatenation.
"""

from dataclasses import asdict, dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd

from .packs import PackType

# Variable sentinel for rows that single out no column
ALL = '.all'
# Row-id sentinel for rows that single out no row; keys start at 1
ALL_ROWS = 0


@dataclass(frozen=True)
class PackInfo:
    """
    Metadata for one applied pack.

    Attributes:
        name: Pack name, declared or generated.
        type: Declared or inferred pack type. None if the pack failed
            before its type was known.
        success: Whether the pack ran and its output was normalized.
        warnings: Warning messages raised by the pack body, if any.
        error: Error message for a failed pack.
        error_type: Error class name for a failed pack.
    """
    name: str
    type: Optional[PackType]
    success: bool
    warnings: Optional[str] = None
    error: Optional[str] = None
    error_type: Optional[str] = None

    def to_dict(self) -> Dict:
        d = asdict(self)
        d['type'] = self.type.value if self.type else None
        return d


@dataclass(frozen=True)
class ReportRow:
    """
    One rule verdict.

    Attributes:
        pack: Name of the pack that produced the verdict.
        rule: Rule name.
        variable: Column or rendered group key, ALL for none.
        row_id: Origin row key, ALL_ROWS for none.
        verdict: True for a breaker (rule violated), False for an obeyer.
        pack_type: Type of the producing pack. Carried along for filtering;
            not part of the report schema or of row equality.
    """
    pack: str
    rule: str
    variable: str
    row_id: int
    verdict: bool
    pack_type: Optional[PackType] = field(default=None, compare=False, repr=False)

    @property
    def is_breaker(self) -> bool:
        return self.verdict

    def to_dict(self) -> Dict:
        d = asdict(self)
        del d['pack_type']
        return d


PACKS_INFO_COLUMNS = ['name', 'type', 'success', 'warnings', 'error', 'error_type']
REPORT_COLUMNS = ['pack', 'rule', 'variable', 'row_id', 'verdict']


@dataclass(frozen=True)
class Exposure:
    """
    Packs metadata plus the normalized report.

    Usage:
        exposure = get_exposure(expose(df, packs))
        exposure.breakers        # report rows with verdict True
        exposure.failed_packs    # PackInfo of packs that errored
        info, report = exposure.to_frames()
    """
    packs_info: Tuple[PackInfo, ...] = ()
    report: Tuple[ReportRow, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'packs_info', tuple(self.packs_info))
        object.__setattr__(self, 'report', tuple(self.report))

    @property
    def breakers(self) -> List[ReportRow]:
        return [r for r in self.report if r.verdict]

    @property
    def breaker_count(self) -> int:
        return sum(1 for r in self.report if r.verdict)

    @property
    def failed_packs(self) -> List[PackInfo]:
        return [p for p in self.packs_info if not p.success]

    @property
    def pack_names(self) -> List[str]:
        return [p.name for p in self.packs_info]

    def to_dict(self) -> Dict:
        """Serialize the exposure to a dictionary."""
        return {
            'summary': {
                'packs': len(self.packs_info),
                'failed_packs': len(self.failed_packs),
                'report_rows': len(self.report),
                'breakers': self.breaker_count,
            },
            'packs_info': [p.to_dict() for p in self.packs_info],
            'report': [r.to_dict() for r in self.report],
        }

    def to_frames(self) -> Tuple[pd.DataFrame, pd.DataFrame]:
        """Return ``(packs_info, report)`` as DataFrames."""
        info = pd.DataFrame([p.to_dict() for p in self.packs_info], columns=PACKS_INFO_COLUMNS)
        report = pd.DataFrame([r.to_dict() for r in self.report], columns=REPORT_COLUMNS)
        return info, report


def bind_exposures(*exposures: Optional[Exposure]) -> Exposure:
    """
    Concatenate exposures in order.

    None entries are skipped. Same-named packs from different exposures
    are kept as separate entries.
    """
    present: Iterable[Exposure] = [e for e in exposures if e is not None]
    packs_info: List[PackInfo] = []
    report: List[ReportRow] = []
    for exposure in present:
        packs_info.extend(exposure.packs_info)
        report.extend(exposure.report)
    return Exposure(packs_info=tuple(packs_info), report=tuple(report))
