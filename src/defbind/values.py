"""
Small value objects embedded in definitions.

Plain data containers with dict export/import for the definition codec.
"""
from dataclasses import dataclass
from typing import Any, Dict, NamedTuple, Optional


@dataclass(frozen=True)
class RuntimeContext:
    """Runtime context a remote workflow or order executes in.

    Either a workspace or an application (with version) is set.
    """
    workspace: Optional[str] = None
    application: Optional[str] = None
    version: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {key: value for key, value in (
            ('workspace', self.workspace),
            ('application', self.application),
            ('version', self.version),
        ) if value is not None}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RuntimeContext':
        return cls(
            workspace=data.get('workspace'),
            application=data.get('application'),
            version=data.get('version'),
        )


@dataclass
class ColumnDefinition:
    """Column of a predefined table: header name plus data path within a row."""
    name: str = ''
    path: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'path': self.path}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ColumnDefinition':
        return cls(name=data.get('name', ''), path=data.get('path', ''))


class OptionItem(NamedTuple):
    """One selectable entry of a dropdown."""
    name: Any
    value: Any
