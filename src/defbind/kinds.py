"""
Concrete definition variants.

Leaves: text item, definition list entry, inputs (text input, text area,
dropdown, checkbox), buttons (plain, open details, start order), component.
Containers: container, form, definition list, panel box, form panel, table
panel, predefined table panel, tree panel.

Each variant is tagged with a DefinitionKind and composed from the traits in
defbind.traits rather than a deep class chain.
"""
from dataclasses import dataclass, field
import logging
from typing import Any, Iterator, List, Optional, Sequence

from defbind.codec import DefinitionKind, Nested, definition_class, prop
from defbind.config import get_engine_config
from defbind.definition import (
    BaseDefinition,
    Definition,
    DefinitionWorkflow,
    register_validator_collector,
)
from defbind.diagnostics import DiagnosticKind, DiagnosticRegistry
from defbind.events import DefinitionEvent
from defbind.observer import ComponentDefinitionData, capability, settle
from defbind.traits import Containerable, Validatable
from defbind.values import ColumnDefinition, OptionItem, RuntimeContext

logger = logging.getLogger(__name__)


def _join_text(values: Sequence[Any]) -> str:
    return ', '.join('' if value is None else str(value) for value in values)


# ==================== ITEMS ====================

@definition_class('ItemDefinition', DefinitionKind.ITEM)
class ItemDefinition(BaseDefinition):

    def resolve_text(self, data: Optional[Sequence[Any]]) -> str:
        """Resolved values joined for display (None renders empty)."""
        return _join_text(self.resolve_data(data))


@definition_class('TextItemDefinition', DefinitionKind.TEXT_ITEM)
class TextItemDefinition(ItemDefinition):
    pass


@definition_class('DefinitionListEntryDefinition', DefinitionKind.DEFINITION_LIST_ENTRY)
class DefinitionListEntryDefinition(ItemDefinition):
    pass


@definition_class('InputDefinition', DefinitionKind.INPUT)
class InputDefinition(Validatable, ItemDefinition):
    placeholder: str = prop('placeholder', '')


@definition_class('TextInputDefinition', DefinitionKind.TEXT_INPUT)
class TextInputDefinition(InputDefinition):
    is_password: bool = prop('isPassword', False)


@definition_class('TextAreaDefinition', DefinitionKind.TEXT_AREA)
class TextAreaDefinition(InputDefinition):
    number_of_lines: Optional[int] = prop('numberOfLines', None)

    @property
    def lines(self) -> int:
        return self.number_of_lines or 4


@definition_class('PossibleValuesDefinition', DefinitionKind.POSSIBLE_VALUES)
class PossibleValuesDefinition(Definition):
    """Source of a dropdown's options: a list plus label/value paths per entry."""
    list_item_label_path: str = prop('listItemLabelPath', '')
    list_item_value_path: str = prop('listItemValuePath', '')

    def get_option_items(self, data: Optional[Sequence[Any]]) -> List[OptionItem]:
        """Resolve the list of objects serving as root for the option items."""
        raw_options = self.resolve_data_for_first_path(data)
        if not isinstance(raw_options, (list, tuple)):
            logger.warning(f"No possible values defined for dropdown. Data path of possible values: {self.data_path!r}")
            return []
        return [
            OptionItem(name=item.resolve(self.list_item_label_path), value=item.resolve(self.list_item_value_path))
            for item in raw_options
            if item is not None
        ]


@definition_class('DropdownDefinition', DefinitionKind.DROPDOWN)
class DropdownDefinition(InputDefinition):
    possible_values: Optional[PossibleValuesDefinition] = prop('possibleValues', None, nested=Nested.DEFINITION)

    def __post_init__(self):
        super().__post_init__()
        if self.possible_values is None:
            self.possible_values = PossibleValuesDefinition(ident='possibleValues')
        self.possible_values.set_parent(self)

    def get_option_items(self, data: Optional[Sequence[Any]]) -> List[OptionItem]:
        return self.possible_values.get_option_items(data)


@definition_class('CheckboxDefinition', DefinitionKind.CHECKBOX)
class CheckboxDefinition(InputDefinition):
    # multiple data paths make no sense here, only the first one is used

    def is_checked(self, data: Optional[Sequence[Any]]) -> bool:
        return bool(self.resolve_data_for_first_path(data))


@definition_class('ButtonDefinition', DefinitionKind.BUTTON)
class ButtonDefinition(ItemDefinition):
    pass


@definition_class('OpenDetailsButtonDefinition', DefinitionKind.OPEN_DETAILS_BUTTON)
class OpenDetailsButtonDefinition(ButtonDefinition):
    details_definition_reference: Optional[Definition] = prop(
        'detailsDefinitionReference', None, nested=Nested.DEFINITION
    )

    def set_parent(self, parent: Definition) -> None:
        super().set_parent(parent)
        # Only a workflow reference joins the parent's path hierarchy.
        # A definition opened directly starts a new one.
        if isinstance(self.details_definition_reference, DefinitionWorkflow):
            self.details_definition_reference.set_parent(parent)

    def _owned_definitions(self) -> Iterator[Definition]:
        yield from super()._owned_definitions()
        reference = self.details_definition_reference
        # a parented workflow reference is owned by the button's parent
        if reference is not None and reference.parent is None:
            yield reference

    async def open_details(self, data: Optional[Sequence[Any]]) -> Any:
        """Resolve the details reference with this button's data and open the result.

        Returns:
            Result of observer.open_definition(), None if nothing was opened
        """
        if self.details_definition_reference is None:
            return None
        bundle = await self.details_definition_reference.resolve_definition(self.resolve_data(data))
        if bundle is None or not isinstance(bundle.definition, BaseDefinition):
            return None
        open_definition = capability(self.observer, 'open_definition')
        if open_definition is None:
            DiagnosticRegistry.emit(
                DiagnosticKind.CAPABILITY_MISSING,
                "OpenDetailsButtonDefinition: Cannot open details because the observer function is not defined.",
                definition_ident=self.ident,
                level=logging.ERROR,
            )
            return None
        return await settle(open_definition(bundle.definition, bundle.data))


@definition_class('StartOrderButtonDefinition', DefinitionKind.START_ORDER_BUTTON)
class StartOrderButtonDefinition(ButtonDefinition):
    service_fqn: Optional[str] = prop('serviceFQN', None)
    service_rtc: Optional[RuntimeContext] = prop('serviceRTC', None, nested=Nested.VALUE, value_type=RuntimeContext)
    synchronously: bool = prop('synchronously', False)
    show_result: bool = prop('showResult', False)

    async def start_order(self, data: Optional[Sequence[Any]]) -> Any:
        """Let the observer start the service with this button's resolved data."""
        start_order = capability(self.observer, 'start_order')
        if start_order is None:
            DiagnosticRegistry.emit(
                DiagnosticKind.CAPABILITY_MISSING,
                f"StartOrderButtonDefinition: Cannot start {self.service_fqn!r} because the observer function is not defined.",
                definition_ident=self.ident,
                level=logging.ERROR,
            )
            return None
        return await settle(start_order(self, self.resolve_data(data)))


@dataclass
class ComponentBinding:
    """A custom component together with the data it was bound to."""
    component: Any
    data: ComponentDefinitionData


@definition_class('ComponentDefinition', DefinitionKind.COMPONENT)
class ComponentDefinition(ItemDefinition):
    component_name: Optional[str] = prop('componentName', None)
    parameter: Optional[str] = prop('parameter', None)

    def bind_component(self, data: Optional[Sequence[Any]]) -> Optional[ComponentBinding]:
        """Look up the custom component via the observer and bind it to the data.

        Returns:
            The binding, None if hidden or the component cannot be resolved
        """
        if self.is_hidden_for(data):
            return None
        get_component = capability(self.observer, 'get_component')
        component = get_component(self.component_name) if get_component else None
        if component is None:
            DiagnosticRegistry.emit(
                DiagnosticKind.CAPABILITY_MISSING,
                f"ComponentDefinition: Component-class {self.component_name!r} cannot be resolved. "
                "Either there's no observer defined or the observer does not resolve this component within get_component().",
                definition_ident=self.ident,
                level=logging.ERROR,
            )
            return None
        data = list(data or [])
        return ComponentBinding(
            component=component,
            data=ComponentDefinitionData(definition=self, data=data, resolved_data=self.resolve_data(data)),
        )


# ==================== CONTAINERS ====================

@definition_class('ContainerDefinition', DefinitionKind.CONTAINER)
class ContainerDefinition(Containerable, BaseDefinition):

    def get_container_label(self, data: Optional[Sequence[Any]]) -> Any:
        return self.translate(self.label)


@definition_class('FormDefinition', DefinitionKind.FORM)
class FormDefinition(ContainerDefinition):
    pass


@definition_class('DefinitionListDefinition', DefinitionKind.DEFINITION_LIST)
class DefinitionListDefinition(FormDefinition):
    pass


@definition_class('PanelBoxDefinition', DefinitionKind.PANEL_BOX)
class PanelBoxDefinition(BaseDefinition):
    left_area: Optional[FormDefinition] = prop('leftArea', None, nested=Nested.DEFINITION)
    right_area: Optional[FormDefinition] = prop('rightArea', None, nested=Nested.DEFINITION)

    def __post_init__(self):
        super().__post_init__()
        for area in self._areas():
            area.set_parent(self)
            # text items in a panel box must not have labels
            for child in area.children:
                if isinstance(child, TextItemDefinition) and child.label:
                    child.label = ''

    def _areas(self) -> List[FormDefinition]:
        return [area for area in (self.left_area, self.right_area) if area is not None]

    def get_panel_label(self, data: Optional[Sequence[Any]]) -> str:
        """Own label, left area label and the left area's resolved values, joined by spaces."""
        parts: List[Any] = [self.translate(self.label)]
        if self.left_area is not None:
            parts.append(self.translate(self.left_area.label))
            for child in self.left_area.children:
                parts.extend(child.resolve_data(data))
        return ' '.join(str(part) for part in parts if part)


@definition_class('FormPanelDefinition', DefinitionKind.FORM_PANEL)
class FormPanelDefinition(FormDefinition):
    collapsable: bool = prop('collapsable', False)
    collapsed: bool = prop('collapsed', False)
    closable: bool = prop('closable', False)
    compact: bool = prop('compact', False)
    trigger_close: Optional[DefinitionEvent] = prop('triggerClose', None, nested=Nested.VALUE, value_type=DefinitionEvent)
    header: Optional[PanelBoxDefinition] = prop('header', None, nested=Nested.DEFINITION)
    footer: Optional[PanelBoxDefinition] = prop('footer', None, nested=Nested.DEFINITION)

    def __post_init__(self):
        super().__post_init__()
        for box in (self.header, self.footer):
            if box is not None:
                box.set_parent(self)

    def get_container_label(self, data: Optional[Sequence[Any]]) -> Any:
        label = super().get_container_label(data)
        if not label and self.header is not None:
            label = self.header.get_panel_label(data)
        return label or None


@definition_class('TablePanelDefinition', DefinitionKind.TABLE_PANEL)
class TablePanelDefinition(FormPanelDefinition):
    table_workflow_fqn: Optional[str] = prop('tableWorkflowFQN', None)
    count_workflow_fqn: Optional[str] = prop('countWorkflowFQN', None)
    table_workflow_rtc: Optional[RuntimeContext] = prop(
        'tableWorkflowRTC', None, nested=Nested.VALUE, value_type=RuntimeContext
    )
    # never parented: the details hierarchy starts anew with the selected row
    details_definition_reference: Optional[Definition] = prop(
        'detailsDefinitionReference', None, nested=Nested.DEFINITION
    )
    trigger_refresh: Optional[DefinitionEvent] = prop(
        'triggerRefresh', default_factory=DefinitionEvent, nested=Nested.VALUE, value_type=DefinitionEvent
    )
    selection_data_path: str = prop('selectionDataPath', '')
    monitoring_level: Optional[int] = prop('monitoringLevel', None)
    priority: Optional[int] = prop('priority', None)
    table_data_source: Any = field(default=None, repr=False)

    def __post_init__(self):
        super().__post_init__()
        # select the whole row object if no selection data path is defined
        if not self.selection_data_path:
            self.selection_data_path = get_engine_config().default_selection_data_path

    def _owned_definitions(self) -> Iterator[Definition]:
        yield from super()._owned_definitions()
        if self.details_definition_reference is not None:
            yield self.details_definition_reference

    def get_table_data_source(self) -> Any:
        return self.table_data_source


@definition_class('PredefinedTablePanelDefinition', DefinitionKind.PREDEFINED_TABLE_PANEL)
class PredefinedTablePanelDefinition(TablePanelDefinition):
    columns: Optional[List[ColumnDefinition]] = prop(
        'columns', None, nested=Nested.VALUES, value_type=ColumnDefinition
    )

    def __post_init__(self):
        super().__post_init__()
        if self.columns is None:
            self.columns = []


@definition_class('TreePanelDefinition', DefinitionKind.TREE_PANEL)
class TreePanelDefinition(FormPanelDefinition):
    structure_rtc: Optional[RuntimeContext] = prop('structureRTC', None, nested=Nested.VALUE, value_type=RuntimeContext)


# ==================== VALIDATOR DISPATCH ====================

@register_validator_collector(
    DefinitionKind.INPUT,
    DefinitionKind.TEXT_INPUT,
    DefinitionKind.TEXT_AREA,
    DefinitionKind.DROPDOWN,
    DefinitionKind.CHECKBOX,
)
def _input_validators(definition: InputDefinition) -> List[Any]:
    return definition.validators


@register_validator_collector(*(kind for kind in DefinitionKind if kind.is_container))
def _container_validators(definition: ContainerDefinition) -> List[Any]:
    validators: List[Any] = []
    for child in definition.children:
        validators.extend(child.get_validators())
    return validators

