"""
Definition wire codec and kind registry.

Definitions arrive as JSON objects tagged with ``$meta.fqn``
(e.g. ``xmcp.forms.datatypes.FormDefinition``). Every definition variant is a
dataclass registered under its type name via @definition_class; its fields
declare their wire names via prop(). decode_definition() and
encode_definition() walk those fields generically.

Architecture:
    DefinitionKind  - flat tag carried by every variant (dispatch key)
    definition_class - registers a variant (type name -> class)
    prop            - dataclass field carrying wire name + nesting info
"""
import dataclasses
from dataclasses import MISSING, dataclass, field, fields
from enum import Enum
import logging
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

from defbind.config import get_engine_config

logger = logging.getLogger(__name__)

T = TypeVar('T')


class DefinitionKind(Enum):
    """Tag of every definition variant."""
    DEFINITION = "definition"
    BASE = "base"
    WORKFLOW = "workflow"
    ITEM = "item"
    TEXT_ITEM = "text_item"
    DEFINITION_LIST_ENTRY = "definition_list_entry"
    INPUT = "input"
    TEXT_INPUT = "text_input"
    TEXT_AREA = "text_area"
    DROPDOWN = "dropdown"
    POSSIBLE_VALUES = "possible_values"
    CHECKBOX = "checkbox"
    BUTTON = "button"
    OPEN_DETAILS_BUTTON = "open_details_button"
    START_ORDER_BUTTON = "start_order_button"
    COMPONENT = "component"
    CONTAINER = "container"
    FORM = "form"
    DEFINITION_LIST = "definition_list"
    PANEL_BOX = "panel_box"
    FORM_PANEL = "form_panel"
    TABLE_PANEL = "table_panel"
    PREDEFINED_TABLE_PANEL = "predefined_table_panel"
    TREE_PANEL = "tree_panel"

    @property
    def is_container(self) -> bool:
        return self in CONTAINER_KINDS

    @property
    def is_input(self) -> bool:
        return self in INPUT_KINDS


CONTAINER_KINDS = frozenset({
    DefinitionKind.CONTAINER,
    DefinitionKind.FORM,
    DefinitionKind.DEFINITION_LIST,
    DefinitionKind.FORM_PANEL,
    DefinitionKind.TABLE_PANEL,
    DefinitionKind.PREDEFINED_TABLE_PANEL,
    DefinitionKind.TREE_PANEL,
})

INPUT_KINDS = frozenset({
    DefinitionKind.INPUT,
    DefinitionKind.TEXT_INPUT,
    DefinitionKind.TEXT_AREA,
    DefinitionKind.DROPDOWN,
    DefinitionKind.CHECKBOX,
})


class Nested(Enum):
    """How a field's wire value maps to Python."""
    DEFINITION = "definition"
    DEFINITIONS = "definitions"
    VALUE = "value"
    VALUES = "values"


# Type name (last fqn segment) -> definition class
_definition_classes: Dict[str, type] = {}


def prop(
    wire: str,
    default: Any = MISSING,
    *,
    default_factory: Callable[[], Any] = MISSING,
    nested: Optional[Nested] = None,
    value_type: Optional[type] = None,
) -> Any:
    """Declare a wire-mapped dataclass field.

    Args:
        wire: JSON key of the field
        default: Field default
        default_factory: Field default factory (mutually exclusive with default)
        nested: Nesting mode for definitions / value objects, None for plain values
        value_type: Class with to_dict()/from_dict() for Nested.VALUE(S)
    """
    metadata = {'wire': wire, 'nested': nested, 'value_type': value_type}
    return field(default=default, default_factory=default_factory, metadata=metadata)


def definition_class(type_name: str, kind: DefinitionKind) -> Callable[[Type[T]], Type[T]]:
    """Register a definition variant.

    The class becomes an identity-compared dataclass (definitions are tree
    nodes, two equal-looking nodes are still different nodes) tagged with
    ``kind`` and ``type_name``.
    """
    def decorator(cls: Type[T]) -> Type[T]:
        cls = dataclass(eq=False)(cls)
        cls.kind = kind
        cls.type_name = type_name
        if type_name in _definition_classes:
            logger.warning(f"Overwriting registered definition class: {type_name}")
        _definition_classes[type_name] = cls
        return cls
    return decorator


def get_definition_class(fqn: str) -> Optional[type]:
    """Look up a definition class by fqn or bare type name."""
    return _definition_classes.get(fqn.rsplit('.', 1)[-1])


def registered_definition_classes() -> Dict[str, type]:
    return dict(_definition_classes)


def qualified_name(type_name: str) -> str:
    return f"{get_engine_config().definition_namespace}.{type_name}"


# ==================== DECODE ====================

def _unwrap_list(value: Any) -> List[Any]:
    # server arrays may come wrapped as {"$meta": ..., "$list": [...]}
    if isinstance(value, dict):
        return list(value.get('$list') or [])
    return list(value or [])


def _decode_field(f: dataclasses.Field, wire: str, value: Any) -> Any:
    nested = f.metadata.get('nested')
    value_type = f.metadata.get('value_type')
    if value is None or nested is None:
        return value
    if nested is Nested.DEFINITION:
        return decode_definition(value, ident=wire)
    if nested is Nested.DEFINITIONS:
        # list entries are shown definitions, unknown ones still render as such
        return [
            decode_definition(item, ident=str(index), fallback='BaseDefinition')
            for index, item in enumerate(_unwrap_list(value))
        ]
    if nested is Nested.VALUE:
        return value_type.from_dict(value)
    return [value_type.from_dict(item) for item in _unwrap_list(value)]


def decode_definition(json_data: Dict[str, Any], ident: str = '', fallback: str = 'Definition') -> Any:
    """Decode a definition tree from its JSON form.

    Nested definitions get the property name (or list index) they were decoded
    from as ident. Children are parented by the variants' __post_init__.

    Args:
        json_data: Definition JSON with ``$meta.fqn``
        ident: Ident to assign to the decoded root
        fallback: Type name to decode unknown types as

    Returns:
        The decoded definition (the fallback type for unknown types)
    """
    fqn = (json_data.get('$meta') or {}).get('fqn', '')
    cls = get_definition_class(fqn) if fqn else None
    if cls is None:
        cls = _definition_classes[fallback]
        logger.warning(f"Unknown definition type {fqn!r}, decoding as {cls.type_name}")

    kwargs: Dict[str, Any] = {'ident': ident}
    for f in fields(cls):
        wire = f.metadata.get('wire')
        if wire and wire in json_data:
            kwargs[f.name] = _decode_field(f, wire, json_data[wire])
    return cls(**kwargs)


# ==================== ENCODE ====================

def _encode_field(f: dataclasses.Field, value: Any) -> Any:
    nested = f.metadata.get('nested')
    if nested is Nested.DEFINITION:
        return encode_definition(value)
    if nested is Nested.DEFINITIONS:
        return [encode_definition(item) for item in value]
    if nested is Nested.VALUE:
        return value.to_dict()
    if nested is Nested.VALUES:
        return [item.to_dict() for item in value]
    return value


def encode_definition(definition: Any) -> Dict[str, Any]:
    """Export a definition tree to a JSON-serializable dict (None fields omitted)."""
    encoded: Dict[str, Any] = {'$meta': {'fqn': qualified_name(definition.type_name)}}
    for f in fields(definition):
        wire = f.metadata.get('wire')
        if not wire:
            continue
        value = getattr(definition, f.name)
        if value is not None:
            encoded[wire] = _encode_field(f, value)
    return encoded
