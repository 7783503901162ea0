"""
Core exposure engine.

ExposureEngine applies packs to a dataset in order, isolates pack
failures, normalizes every output into the report schema and attaches
the resulting Exposure to the dataset, appended after any exposure it
already carries.
"""

import logging
import re
import warnings
from collections import Counter
from typing import Any, Iterable, List, Optional, Tuple

import pandas as pd

from .classify import classify
from .errors import (
    AmbiguousPackType,
    DuplicatePackName,
    MalformedPackResult,
    PackError,
    PackExecutionError,
)
from .exposure import Exposure, PackInfo, ReportRow, bind_exposures
from .frame import ExposedFrame, FrameLike, as_exposed
from .keys import key, keyed_view
from .normalize import normalize
from .packs import Pack, PackType, flatten_packs
from .separator import DEFAULT_RULE_SEP, Separator, compile_separator

logger = logging.getLogger('rulepack.engine')

UNKNOWN_TYPE_LABEL = 'pack'
GENERATED_NAME = re.compile(
    r'(?:' + '|'.join([t.value for t in PackType] + [UNKNOWN_TYPE_LABEL]) + r')\.\.\d+'
)


class ExposureEngine:
    """
    Expose a DataFrame to a list of packs.

    Usage:
        from rulepack import ExposureEngine, data_packs, row_packs

        engine = ExposureEngine(remove_obeyers=False)
        engine.add_packs(data_packs(enough_rows=lambda df: {'nrow_gt_10': len(df) > 10}))
        engine.add_pack(lambda df: (df[['mpg']] > 0).rename(columns={'mpg': 'positive_mpg'}))

        exposed = engine.expose(df)
        exposed.exposure.breakers

    Args:
        remove_obeyers: Drop report rows whose rule was obeyed.
        guess: Infer the type of packs that do not declare one.
        rule_sep: Default separator for composite rule names. Strings are
            regular expressions; see literal_sep for verbatim matching.
    """

    def __init__(self, remove_obeyers: bool = True, guess: bool = True,
                 rule_sep: Separator = DEFAULT_RULE_SEP):
        compile_separator(rule_sep)
        self.remove_obeyers = remove_obeyers
        self.guess = guess
        self.rule_sep = rule_sep
        self._packs: List[Pack] = []

    def add_pack(self, pack: Any) -> 'ExposureEngine':
        """Add a single pack (or bare callable)."""
        self._packs.extend(flatten_packs([pack]))
        return self

    def add_packs(self, packs: Iterable[Any]) -> 'ExposureEngine':
        """Add packs from a possibly nested collection."""
        self._packs.extend(flatten_packs(packs))
        return self

    @property
    def pack_count(self) -> int:
        return len(self._packs)

    @property
    def packs(self) -> List[Pack]:
        return list(self._packs)

    def expose(self, frame: FrameLike) -> ExposedFrame:
        """
        Apply all packs to ``frame`` and attach the exposure.

        The returned wrapper holds the same data object; only the
        attached exposure (and, on first exposure, the row keys) differ.

        Raises:
            InvalidSeparator: A pack carries an unusable separator.
            DuplicatePackName: Two packs share an explicit name, or an
                explicit name has the form of a generated one.
            AmbiguousPackType: Guessing is off and a pack has no type.
            RowKeyMismatch: Tracked keys no longer fit the data.
        """
        exposed = as_exposed(frame)
        self._check_packs()
        data, keys = key(exposed.data, exposed.keys)

        counters = Counter(
            p.type.value if p.type else UNKNOWN_TYPE_LABEL
            for p in (exposed.exposure.packs_info if exposed.exposure else ())
        )

        packs_info: List[PackInfo] = []
        report: List[ReportRow] = []
        for pack in self._packs:
            info, rows = self._apply(pack, data, keys, counters)
            packs_info.append(info)
            report.extend(rows)

        if self.remove_obeyers:
            report = [r for r in report if r.verdict]

        fresh = Exposure(packs_info=tuple(packs_info), report=tuple(report))
        logger.info(
            "Exposed %d rows to %d packs: %d failed, %d breakers",
            len(data), len(packs_info), len(fresh.failed_packs), fresh.breaker_count,
        )
        return ExposedFrame(
            data=exposed.data,
            keys=keys,
            exposure=bind_exposures(exposed.exposure, fresh),
        )

    # --- Internals ------------------------------------------------------------

    def _check_packs(self) -> None:
        seen = set()
        for pack in self._packs:
            if pack.rule_sep is not None:
                compile_separator(pack.rule_sep)
            if pack.name is not None:
                if GENERATED_NAME.fullmatch(pack.name):
                    raise DuplicatePackName(
                        f"pack name {pack.name!r} is reserved for generated names"
                    )
                if pack.name in seen:
                    raise DuplicatePackName(f"pack name {pack.name!r} is used more than once")
                seen.add(pack.name)
            if not self.guess and pack.declared_type is None:
                raise AmbiguousPackType(
                    "pack type is not declared and guessing is disabled",
                    pack_name=pack.name,
                )

    def _apply(self, pack: Pack, data: pd.DataFrame, keys: pd.Index,
               counters: Counter) -> Tuple[PackInfo, List[ReportRow]]:
        """Run one pack. Pack errors are recorded, never raised."""
        sep = pack.rule_sep if pack.rule_sep is not None else self.rule_sep
        pack_type: Optional[PackType] = pack.declared_type
        error: Optional[PackError] = None
        raw = None

        logger.debug("Running pack %s", pack.name or '<unnamed>')
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter('always')
            try:
                raw = pack(keyed_view(data, keys))
            except Exception as exc:
                error = PackExecutionError(f"{type(exc).__name__}: {exc}", cause=exc)

        if error is None:
            try:
                pack_type = classify(raw, pack_type, pack.group_vars, sep, self.guess)
            except PackError as exc:
                error = exc
            except Exception as exc:
                error = MalformedPackResult(f"unusable output ({type(exc).__name__}: {exc})")

        label = pack_type.value if pack_type else UNKNOWN_TYPE_LABEL
        counters[label] += 1
        name = pack.name or f'{label}..{counters[label]}'

        rows: List[ReportRow] = []
        if error is None:
            try:
                rows = normalize(raw, pack_type, name, sep, pack.group_vars, pack.group_sep, keys)
            except PackError as exc:
                error = exc
            except Exception as exc:
                error = MalformedPackResult(f"unusable output ({type(exc).__name__}: {exc})")

        pack_warnings = '; '.join(str(w.message) for w in caught) or None
        if pack_warnings:
            logger.warning("Pack %s raised warnings: %s", name, pack_warnings)

        if error is not None:
            error.pack_name = name
            logger.warning("Pack %s failed (%s): %s", name, type(error).__name__, error)
            return PackInfo(
                name=name,
                type=pack_type,
                success=False,
                warnings=pack_warnings,
                error=str(error),
                error_type=type(error).__name__,
            ), []

        logger.debug("Pack %s (%s) produced %d report rows", name, label, len(rows))
        return PackInfo(name=name, type=pack_type, success=True, warnings=pack_warnings), rows


def expose(frame: FrameLike, *packs: Any, remove_obeyers: bool = True, guess: bool = True,
           rule_sep: Separator = DEFAULT_RULE_SEP) -> ExposedFrame:
    """
    Apply packs to ``frame`` in one call.

    ``packs`` may be packs, bare callables, or nested lists of them.
    """
    engine = ExposureEngine(remove_obeyers=remove_obeyers, guess=guess, rule_sep=rule_sep)
    engine.add_packs(packs)
    return engine.expose(frame)
