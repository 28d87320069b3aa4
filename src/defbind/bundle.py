"""
Resolution bundles: minimal resumable snapshots of remotely resolved definitions.

When a definition workflow resolves to a new definition, the workflow and the
pruned data it was resolved with are stored on the resulting definition. The
bundle can be encoded (deep links, page reloads) and handed back to the remote
side later to re-enter the workflow without resending unrelated data.

Wire format (stable):
    {"definition": <definition JSON>, "data": <data JSON>, "constraint": "<ident>"}
"constraint" is omitted when absent.
"""
from dataclasses import dataclass, field
import json
from typing import Any, Dict, List, Optional

from defbind.codec import decode_definition
from defbind.data_object import DataObject, DataObjectLike


@dataclass
class DefinitionBundle:
    """A definition plus the data it is shown with."""
    definition: Any
    data: List[Any] = field(default_factory=list)


@dataclass
class EncodableDefinitionBundle(DefinitionBundle):
    """Bundle with an optional constraint (ident of the requesting sub-definition)."""
    constraint_id: Optional[str] = None

    def encode(self) -> Dict[str, Any]:
        """Export to the bundle wire format.

        Only the first data element is encoded (plain values as they are); an
        empty object stands in when there is none.
        """
        first = self.data[0] if self.data else None
        if isinstance(first, DataObjectLike):
            first = first.encode()
        encoded: Dict[str, Any] = {
            'definition': self.definition.encode() if self.definition is not None else None,
            'data': first if first is not None else {},
        }
        if self.constraint_id:
            encoded['constraint'] = self.constraint_id
        return encoded

    def to_json(self) -> str:
        return json.dumps(self.encode())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EncodableDefinitionBundle':
        """Import from the bundle wire format (e.g., a persisted deep link)."""
        definition_json = data.get('definition')
        data_json = data.get('data')
        if isinstance(data_json, dict):
            data_json = DataObject.decode(data_json)
        return cls(
            definition=decode_definition(definition_json) if definition_json else None,
            data=[data_json] if data_json is not None else [],
            constraint_id=data.get('constraint'),
        )

    @classmethod
    def from_json(cls, text: str) -> 'EncodableDefinitionBundle':
        return cls.from_dict(json.loads(text))
