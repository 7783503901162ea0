"""
Exception taxonomy for pack exposure.

Configuration errors abort a whole ``expose`` call. Pack errors are
caught per pack by the engine and recorded in that pack's PackInfo.
"""

from typing import Dict, Optional, Tuple


class ExposureError(Exception):
    """Base exception for all exposure errors."""
    pass


class PackError(ExposureError):
    """Base exception for failures attributable to a single pack."""

    def __init__(self, message: str, pack_name: Optional[str] = None):
        self.pack_name = pack_name
        super().__init__(message)


class AmbiguousPackType(PackError):
    """Raised when a pack's type is undeclared and cannot be inferred."""
    pass


class PackExecutionError(PackError):
    """Raised when the pack body itself fails."""

    def __init__(self, message: str, pack_name: Optional[str] = None,
                 cause: Optional[BaseException] = None):
        super().__init__(message, pack_name)
        self.cause = cause


class NonLogicalRuleResult(PackError):
    """Raised when a rule column holds non-boolean values."""

    def __init__(self, message: str, pack_name: Optional[str] = None,
                 column: Optional[str] = None):
        super().__init__(message, pack_name)
        self.column = column


class MalformedPackResult(PackError):
    """Raised when a pack output does not have the shape its type requires."""
    pass


class InvalidSeparator(ExposureError, ValueError):
    """Raised when a rule separator pattern is unusable."""
    pass


class DuplicatePackName(ExposureError, ValueError):
    """Raised when two packs in one call share an explicit name."""
    pass


class RowKeyMismatch(ExposureError):
    """Raised when tracked row keys no longer fit the data they key."""
    pass


class NoExposure(ExposureError, LookupError):
    """Raised when an accessor is called on data without an exposure."""
    pass


class RuleViolation(ExposureError):
    """
    Raised by assert_any_breaker when the report contains breakers.

    Attributes:
        breakers: Report rows with a breaker verdict.
        counts: Number of breakers per (pack, rule).
    """

    def __init__(self, message: str, breakers: Tuple = (),
                 counts: Optional[Dict[Tuple[str, str], int]] = None):
        super().__init__(message)
        self.breakers = tuple(breakers)
        self.counts = counts or {}
