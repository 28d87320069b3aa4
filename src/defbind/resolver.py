"""
Resolver: evaluates normalized paths against a borrowed data array.

All functions are pure with respect to the definition tree. The data array is
only mutated by resolve_assign_path(); prune_data() works on clones.

Resolution rules, per normalized path and in order:
- no paths (empty data path): every element of the data array
- '%null%': None
- '%%': nothing
- '%n%[.rel]': data[n].resolve(rel), or None plus a diagnostic when n is out of
  range or data[n] is missing
- '%n%' on a plain value (not a data object) yields the value itself
"""
import copy
import json
import logging
from typing import Any, List, Optional, Sequence

from defbind.config import get_engine_config
from defbind.data_object import DataObjectLike
from defbind.diagnostics import DiagnosticKind, DiagnosticRegistry
from defbind.paths import NULL_PATH, SKIP_PATH, parse_absolute_path

logger = logging.getLogger(__name__)


def _describe_data(data: Sequence[Any]) -> str:
    if not get_engine_config().dump_data_on_path_warning:
        return ''
    lines = []
    for index, element in enumerate(data):
        try:
            encoded = json.dumps(element.encode()) if element is not None else 'null'
        except (AttributeError, TypeError) as e:
            encoded = f"<unencodable: {e}>"
        lines.append(f"\n    {index}: {encoded}")
    return '\n  data:' + ''.join(lines)


def _is_resolvable(element: Any) -> bool:
    return callable(getattr(element, 'resolve', None))


def resolve_data(paths: Sequence[str], data: Optional[Sequence[Any]], ident: str = '') -> List[Any]:
    """Resolve every normalized path against the data array.

    Args:
        paths: Normalized paths of a definition (empty = match all)
        data: Data array supplied by the caller (borrowed, not mutated)
        ident: Ident of the resolving definition, for diagnostics

    Returns:
        Resolved values, positionally aligned with ``paths`` (except for '%%',
        which contributes nothing, and the match-all case)
    """
    data = list(data or [])
    if not paths:
        # explicit empty path resolves to all the data
        return data

    resolved: List[Any] = []
    for path in paths:
        if path == NULL_PATH:
            resolved.append(None)
        elif path == SKIP_PATH:
            continue
        else:
            absolute = parse_absolute_path(path)
            element = data[absolute.index] if absolute is not None and absolute.index < len(data) else None
            if _is_resolvable(element):
                resolved.append(element.resolve(absolute.relative_path))
            elif element is not None and not absolute.relative_path:
                # plain values handed on as data only resolve as a whole
                resolved.append(element)
            else:
                resolved.append(None)
                DiagnosticRegistry.emit(
                    DiagnosticKind.PATH_RESOLUTION_WARNING,
                    f"Resolving data with invalid path: {path}{_describe_data(data)}",
                    path=path,
                    definition_ident=ident,
                )
    return resolved


def resolve_first(paths: Sequence[str], data: Optional[Sequence[Any]], ident: str = '') -> Any:
    """Return the value resolved for the first path, or None."""
    resolved = resolve_data(paths, data, ident)
    return resolved[0] if resolved else None


def _reduce_blank(value: Any) -> Any:
    # "None -> ''" and "'' -> None" are no change
    return None if value is None or value == '' else value


def resolve_assign_path(paths: Sequence[str], data: Optional[Sequence[Any]], value: Any, ident: str = '') -> bool:
    """Write a value back along the single indexed path.

    Args:
        paths: Normalized paths; exactly one indexed path is required
        data: Data array to write into
        value: New value
        ident: Ident of the assigning definition, for diagnostics

    Returns:
        True if a write happened, False if it was skipped (unchanged value or
        unresolvable path)
    """
    data = data or []
    absolute = parse_absolute_path(paths[0]) if len(paths) == 1 else None
    if absolute is None or absolute.index >= len(data) or not _is_resolvable(data[absolute.index]):
        DiagnosticRegistry.emit(
            DiagnosticKind.ASSIGNMENT_MISMATCH,
            f"Assigning value for invalid path: {','.join(paths)}\nvalue: {value!r}",
            path=','.join(paths),
            definition_ident=ident,
        )
        return False

    current = data[absolute.index].resolve(absolute.relative_path)
    if _reduce_blank(current) == _reduce_blank(value):
        return False
    data[absolute.index].resolve_assign(absolute.relative_path, value)
    return True


def _key_is_referenced(key: str, relative_path: str) -> bool:
    return not relative_path or relative_path == key or relative_path.startswith(key + '.')


def _clone(element: Any) -> Any:
    if isinstance(element, DataObjectLike):
        return element.clone()
    return copy.deepcopy(element)


def prune_data(paths: Sequence[str], data: Optional[Sequence[Any]]) -> List[Any]:
    """Clone the data array, keeping only fields the paths need.

    A top level field of element n survives if some path anchored at n refers
    to it (or to the whole element). Literal tokens keep nothing. Without paths
    (match all) the clones are returned unpruned. Values that are not data
    objects (e.g. resolved strings handed on as data) are copied as they are.

    Args:
        paths: Normalized paths of a definition
        data: Data array to prune (not mutated)

    Returns:
        Pruned deep clones, positionally aligned with ``data``
    """
    pruned = [_clone(element) for element in (data or [])]
    if not paths:
        return pruned

    absolute_paths = [p for p in (parse_absolute_path(path) for path in paths) if p is not None]
    for index, element in enumerate(pruned):
        if not isinstance(element, DataObjectLike):
            continue
        relative_paths = [p.relative_path for p in absolute_paths if p.index == index]
        for key in list(element.data.keys()):
            if not any(_key_is_referenced(key, relative) for relative in relative_paths):
                del element.data[key]
    logger.debug(f"Pruned {len(pruned)} data element(s) for paths {list(paths)}")
    return pruned
