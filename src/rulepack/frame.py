"""
Dataset wrapper carrying an attached exposure.

ExposedFrame pairs the caller's DataFrame with its out-of-band row keys
and the Exposure attached to it. The DataFrame itself is never modified;
attaching or replacing an exposure yields a new wrapper.
"""

from dataclasses import dataclass, replace
from typing import Optional, Tuple, Union

import pandas as pd

from .errors import NoExposure
from .exposure import Exposure, PackInfo, ReportRow


@dataclass(frozen=True, eq=False)
class ExposedFrame:
    """
    A DataFrame plus exposure metadata.

    Attributes:
        data: The caller's data, unchanged.
        keys: Row keys assigned on first exposure, None before that.
        exposure: Attached exposure, None if no packs were applied yet.
    """
    data: pd.DataFrame
    keys: Optional[pd.Index] = None
    exposure: Optional[Exposure] = None

    @property
    def has_exposure(self) -> bool:
        return self.exposure is not None

    def with_exposure(self, exposure: Optional[Exposure]) -> 'ExposedFrame':
        return replace(self, exposure=exposure)


FrameLike = Union[pd.DataFrame, ExposedFrame]


def as_exposed(frame: FrameLike) -> ExposedFrame:
    """Wrap a bare DataFrame; pass an ExposedFrame through."""
    if isinstance(frame, ExposedFrame):
        return frame
    if isinstance(frame, pd.DataFrame):
        return ExposedFrame(data=frame)
    raise TypeError(f"expected a DataFrame or ExposedFrame, got {type(frame).__name__}")


def get_exposure(frame: FrameLike) -> Exposure:
    """
    Return the exposure attached to ``frame``.

    Raises:
        NoExposure: If nothing is attached.
    """
    if not isinstance(frame, ExposedFrame) or frame.exposure is None:
        raise NoExposure("data has no attached exposure; apply packs with expose() first")
    return frame.exposure


def get_packs_info(frame: FrameLike) -> Tuple[PackInfo, ...]:
    return get_exposure(frame).packs_info


def get_report(frame: FrameLike) -> Tuple[ReportRow, ...]:
    return get_exposure(frame).report


def set_exposure(frame: FrameLike, exposure: Exposure) -> ExposedFrame:
    """Attach ``exposure``, replacing any existing one."""
    return as_exposed(frame).with_exposure(exposure)


def remove_exposure(frame: FrameLike) -> ExposedFrame:
    """Drop the attached exposure. Row keys are kept."""
    return as_exposed(frame).with_exposure(None)
