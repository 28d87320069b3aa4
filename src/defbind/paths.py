"""
Path expression normalization.

A definition's raw ``dataPath`` is a comma separated list of path expressions,
each either absolute (``%n%`` anchored at the nth entry of the data array, or
one of the literal tokens) or relative to the parent's first absolute path:

    parent '%1%.customer', child 'name, address.city'
        -> ['%1%.customer.name', '%1%.customer.address.city']

Order is positional: consumers index into the resolved list by position.
"""
import re
from typing import List, NamedTuple, Optional

from defbind.config import get_engine_config

PATH_ANCHOR = '%'
NULL_PATH = '%null%'
SKIP_PATH = '%%'

_ABSOLUTE_PATH_PATTERN = re.compile(r'^%(\d+)%(?:\.(.*))?')


class AbsolutePath(NamedTuple):
    """Parsed ``%index%[.relative]`` path."""
    index: int
    relative_path: str


def join_path(head: str, tail: str) -> str:
    """Join two path fragments without producing a stray '.'."""
    if head and tail:
        return head + '.' + tail
    return head or tail


def split_data_path(data_path: str) -> List[str]:
    """Split a raw data path on ',' and trim each part."""
    return [part.strip() for part in data_path.split(',')]


def implicit_anchor() -> str:
    return f"{PATH_ANCHOR}{get_engine_config().implicit_anchor_index}{PATH_ANCHOR}"


def normalize_data_path(data_path: str, parent_path: Optional[str] = None) -> List[str]:
    """Convert a raw comma separated data path into absolute paths.

    Args:
        data_path: Raw data path as sent by the server
        parent_path: First absolute path of the parent definition, None if unparented

    Returns:
        One absolute path per part, in order. An empty data path yields no parts
        (it matches all the data when resolving).
    """
    if not data_path:
        return []

    normalized = []
    for path in split_data_path(data_path):
        if not path.startswith(PATH_ANCHOR) and parent_path is not None:
            # make absolute by prepending parent path
            path = join_path(parent_path, path)
        # still relative: anchor at the implicit index
        if not path.startswith(PATH_ANCHOR):
            path = join_path(implicit_anchor(), path)
        normalized.append(path)
    return normalized


def parse_absolute_path(path: str) -> Optional[AbsolutePath]:
    """Parse ``%n%[.relative]``.

    Returns:
        AbsolutePath, or None for literal tokens (``%null%``, ``%%``) and anything
        that is not anchored at a numeric index
    """
    match = _ABSOLUTE_PATH_PATTERN.match(path)
    if not match:
        return None
    return AbsolutePath(index=int(match.group(1)), relative_path=match.group(2) or '')


def is_literal_token(path: str) -> bool:
    return path in (NULL_PATH, SKIP_PATH) or not path
