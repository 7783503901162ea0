"""
Rule separator grammar.

Column and cell packs name their result columns ``<rule><sep><variable>``.
The separator is a regular expression, applied once at its leftmost
match. The default is a fixed marker padded on both sides by any run of
ASCII punctuation (underscore included), so names composed by tools that
insert extra ``_`` or ``.`` around the marker still split cleanly::

    parse_rule_name('is_positive._.price')   -> ('is_positive', 'price')
    parse_rule_name('is_positive_._.price')  -> ('is_positive', 'price')
    parse_rule_name('is_positive')           -> None

A plain string is always read as a pattern, so a separator written
with regex metacharacters must be escaped. Use literal_sep to match a
string verbatim::

    parse_rule_name('is_positive._.price', literal_sep('._.'))  -> ('is_positive', 'price')
"""

import re
import string
from typing import Optional, Tuple, Union

from .errors import InvalidSeparator

DEFAULT_MARKER = r'\._\.'
PUNCT = '[' + re.escape(string.punctuation) + ']*'

Separator = Union[str, re.Pattern]


def inside_punct(marker: str = DEFAULT_MARKER) -> str:
    """Pattern matching ``marker`` surrounded by optional punctuation runs."""
    return f'{PUNCT}(?:{marker}){PUNCT}'


DEFAULT_RULE_SEP = inside_punct(DEFAULT_MARKER)


def literal_sep(literal: str) -> re.Pattern:
    """Separator matching ``literal`` verbatim, metacharacters included."""
    if not literal:
        raise InvalidSeparator("literal rule separator must not be empty")
    return re.compile(re.escape(literal))


def compile_separator(sep: Separator) -> re.Pattern:
    """
    Compile and check a rule separator.

    Raises:
        InvalidSeparator: If the pattern does not compile or matches the
            empty string (which would split every name).
    """
    if isinstance(sep, re.Pattern):
        pattern = sep
    elif isinstance(sep, str):
        try:
            pattern = re.compile(sep)
        except re.error as exc:
            raise InvalidSeparator(f"invalid rule separator {sep!r}: {exc}") from exc
    else:
        raise InvalidSeparator(
            f"rule separator must be a string or compiled pattern, got {type(sep).__name__}"
        )

    if pattern.search('') is not None:
        raise InvalidSeparator(f"rule separator {pattern.pattern!r} matches the empty string")
    return pattern


def parse_rule_name(name: str, sep: Separator = DEFAULT_RULE_SEP) -> Optional[Tuple[str, str]]:
    """
    Split a composite column name into ``(rule, variable)``.

    Returns None when the separator does not match, or when the match
    leaves either side empty.
    """
    pattern = compile_separator(sep)
    name = str(name)
    match = pattern.search(name)
    if match is None:
        return None
    rule, var = name[:match.start()], name[match.end():]
    if not rule or not var:
        return None
    return rule, var


def is_composite(name: str, sep: Separator = DEFAULT_RULE_SEP) -> bool:
    return parse_rule_name(name, sep) is not None


def compose_rule_name(rule: str, var: str, sep: str = '._.') -> str:
    """Build a composite ``<rule><sep><variable>`` column name."""
    return f'{rule}{sep}{var}'
