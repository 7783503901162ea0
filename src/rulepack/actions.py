"""
Actions after exposure.

act_after_exposure runs an actor when a trigger fires on exposed data.
assert_any_breaker is the built-in action: it fails when the report
holds any breaker.
"""

import logging
import warnings
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from .errors import RuleViolation
from .exposure import ReportRow
from .frame import ExposedFrame, get_exposure
from .packs import PackType

logger = logging.getLogger('rulepack.actions')

LEVELS = ('error', 'warning', 'info')


def act_after_exposure(frame: ExposedFrame, trigger: Callable[[ExposedFrame], bool],
                       actor: Callable[[ExposedFrame], Any]) -> Any:
    """
    Return ``actor(frame)`` if ``trigger(frame)`` holds, else ``frame``.

    The actor's return value is passed through untouched.
    """
    if not trigger(frame):
        return frame
    return actor(frame)


def _breakers(frame: ExposedFrame, types: Optional[Iterable[PackType]] = None) -> List[ReportRow]:
    exposure = get_exposure(frame)
    breakers = exposure.breakers
    if types is None:
        return breakers
    wanted = set(types)
    return [r for r in breakers if r.pack_type in wanted]


def any_breaker(frame: ExposedFrame, types: Optional[Iterable[PackType]] = None) -> bool:
    """True if the attached report has at least one breaker."""
    return len(_breakers(frame, types)) > 0


def count_breakers(breakers: List[ReportRow]) -> Dict[Tuple[str, str], int]:
    counts: Dict[Tuple[str, str], int] = {}
    for r in breakers:
        counts[(r.pack, r.rule)] = counts.get((r.pack, r.rule), 0) + 1
    return counts


def format_breakers(breakers: List[ReportRow]) -> str:
    """Summarise breakers as one line per (pack, rule) with its count."""
    counts = count_breakers(breakers)
    lines = [f"  pack {pack!r}, rule {rule!r}: {n} breaker(s)" for (pack, rule), n in counts.items()]
    return '\n'.join(lines)


def assert_any_breaker(frame: ExposedFrame, types: Optional[Iterable[PackType]] = None,
                       level: str = 'error') -> ExposedFrame:
    """
    Signal when the attached report holds breakers.

    Args:
        frame: Exposed data.
        types: Only consider packs of these types. All packs when None.
        level: 'error' raises RuleViolation, 'warning' emits a
            UserWarning, 'info' logs the summary.

    Returns:
        ``frame`` unchanged, whenever it does not raise.
    """
    if level not in LEVELS:
        raise ValueError(f"level must be one of {LEVELS}, got {level!r}")

    def actor(exposed: ExposedFrame) -> ExposedFrame:
        breakers = _breakers(exposed, types)
        counts = count_breakers(breakers)
        message = f"Found {len(breakers)} rule breaker(s):\n{format_breakers(breakers)}"

        if level == 'error':
            raise RuleViolation(message, breakers=breakers, counts=counts)
        if level == 'warning':
            warnings.warn(message, UserWarning, stacklevel=4)
        else:
            logger.info(message)
        return exposed

    return act_after_exposure(frame, lambda exposed: any_breaker(exposed, types), actor)
