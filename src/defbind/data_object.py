"""
Data objects the definitions resolve against.

The engine only relies on the DataObjectLike protocol. DataObject is a
dict-backed reference implementation that decodes the server's JSON
(objects carrying ``$meta.fqn``) and supports dotted path access:

    'abc.def.2.ghi' resolves child 'abc', therein child 'def' (a list),
    therein entry 2 and finally its child 'ghi'.
"""
import copy
import logging
from typing import Any, Dict, List, NamedTuple, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


class ResolvedHead(NamedTuple):
    """Result of resolving all but the last segment of a path."""
    value: Any
    head: str
    tail: str


@runtime_checkable
class DataObjectLike(Protocol):
    """Capability contract required of externally owned data objects."""

    data: Dict[str, Any]

    def resolve(self, path: str) -> Any: ...

    def resolve_assign(self, path: str, value: Any) -> None: ...

    def resolve_head(self, path: str) -> ResolvedHead: ...

    def clone(self) -> 'DataObjectLike': ...

    def encode(self) -> Dict[str, Any]: ...


def _split_path(path: str):
    head, _, tail = path.partition('.')
    return head, tail


def _resolve_native(value: Any, path: str) -> Any:
    """Resolve a path inside plain dicts / lists (and nested data objects)."""
    if not path:
        return value
    if isinstance(value, DataObject):
        return value.resolve(path)
    head, tail = _split_path(path)
    if isinstance(value, dict):
        child = value.get(head)
    elif isinstance(value, (list, tuple)):
        try:
            index = int(head)
        except ValueError:
            return None
        child = value[index] if 0 <= index < len(value) else None
    else:
        return None
    return _resolve_native(child, tail) if tail else child


class DataObject:
    """Dict-backed data object.

    Args:
        data: Own fields. Nested objects are DataObjects, dicts, lists or plain values
        fqn: Fully qualified type name sent by the server (``$meta.fqn``)
        ident: Property name or list index this object was decoded from
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None, fqn: Optional[str] = None, ident: str = ''):
        self.data: Dict[str, Any] = dict(data or {})
        self.fqn = fqn
        self.ident = ident

    def __repr__(self) -> str:
        return f"DataObject(fqn={self.fqn!r}, data={self.data!r})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, DataObject):
            return NotImplemented
        return self.fqn == other.fqn and self.data == other.data

    # ==================== PATH ACCESS ====================

    def resolve(self, path: str) -> Any:
        """Resolve a dotted path and return its value.

        Args:
            path: Path to the data field. An empty path resolves to the object itself

        Returns:
            Value of the data field or None, if the path could not be resolved
        """
        if not path:
            return self
        head, tail = _split_path(path)
        value = self.data.get(head)
        if tail:
            return _resolve_native(value, tail)
        return value

    def resolve_head(self, path: str, recursively: bool = True) -> ResolvedHead:
        """Resolve the head of a path, leaving its last (or first) segment as tail.

        For 'abc.def.2.ghi' the head 'abc.def.2' is resolved and 'ghi' is the tail.

        Args:
            path: Path to the data field
            recursively: Split at the last '.' (True) or at the first one (False)
        """
        idx = path.rfind('.') if recursively else path.find('.')
        head = path[:idx] if idx >= 0 else ''
        tail = path[idx + 1:]
        return ResolvedHead(value=self.resolve(head), head=head, tail=tail)

    def resolve_assign(self, path: str, value: Any) -> None:
        """Resolve the parent of a data field and assign a new value to the field."""
        resolved = self.resolve_head(path)
        target = resolved.value
        if isinstance(target, DataObject):
            target.data[resolved.tail] = value
        elif isinstance(target, list):
            try:
                index = int(resolved.tail)
            except ValueError:
                logger.debug(f"Cannot assign non-numeric index {resolved.tail!r} in list at {resolved.head!r}")
                return
            if 0 <= index < len(target):
                target[index] = value
        elif isinstance(target, dict):
            target[resolved.tail] = value

    def resolve_delete(self, path: str) -> None:
        """Resolve the parent of a data field and delete the field."""
        resolved = self.resolve_head(path)
        target = resolved.value
        if isinstance(target, DataObject):
            target.data.pop(resolved.tail, None)
        elif isinstance(target, list):
            try:
                index = int(resolved.tail)
            except ValueError:
                return
            if 0 <= index < len(target):
                del target[index]
        elif isinstance(target, dict):
            target.pop(resolved.tail, None)

    # ==================== COPY / CODEC ====================

    def clone(self) -> 'DataObject':
        """Deep copy; mutating the clone never touches the original."""
        return DataObject(copy.deepcopy(self.data), fqn=self.fqn, ident=self.ident)

    def encode(self) -> Dict[str, Any]:
        """Export to a JSON-serializable dict."""
        encoded: Dict[str, Any] = {}
        if self.fqn:
            encoded['$meta'] = {'fqn': self.fqn}
        for key, value in self.data.items():
            encoded[key] = _encode_value(value)
        return encoded

    @classmethod
    def decode(cls, json_data: Dict[str, Any], ident: str = '') -> 'DataObject':
        """Import from a dict (e.g., loaded from JSON)."""
        meta = json_data.get('$meta') or {}
        data = {
            key: _decode_value(value, key)
            for key, value in json_data.items()
            if key != '$meta'
        }
        return cls(data, fqn=meta.get('fqn'), ident=ident)


def _encode_value(value: Any) -> Any:
    if isinstance(value, DataObject):
        return value.encode()
    if isinstance(value, dict):
        return {key: _encode_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_encode_value(item) for item in value]
    return value


def _decode_value(value: Any, ident: str) -> Any:
    if isinstance(value, dict):
        return DataObject.decode(value, ident=ident)
    if isinstance(value, list):
        return [_decode_value(item, str(index)) for index, item in enumerate(value)]
    return value


def decode_data(json_list: List[Dict[str, Any]]) -> List[DataObject]:
    """Decode the flat data array that accompanies a definition tree."""
    return [DataObject.decode(item, ident=str(index)) if item is not None else None
            for index, item in enumerate(json_list)]
