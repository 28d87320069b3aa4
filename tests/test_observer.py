"""Tests for observer injection and capability lookups."""
import pytest

from defbind import (
    DefinitionObserver,
    DefinitionWorkflow,
    DiagnosticKind,
    DropdownDefinition,
    FormDefinition,
    OpenDetailsButtonDefinition,
    TablePanelDefinition,
    TextInputDefinition,
    TextItemDefinition,
    capability,
    settle,
)


def _tree():
    name = TextInputDefinition(data_path='name', validator_class='required, email')
    dropdown = DropdownDefinition(data_path='status')
    inner = FormDefinition(children=[dropdown])
    form = FormDefinition(data_path='%0%', children=[name, inner])
    return form, name, dropdown, inner


def test_observer_cascades_to_whole_tree():
    form, *_ = _tree()
    observer = DefinitionObserver()
    form.set_observer(observer)
    assert all(definition.observer is observer for definition in form.walk())


def test_observer_reaches_possible_values():
    form, _, dropdown, _ = _tree()
    observer = DefinitionObserver()
    form.set_observer(observer)
    assert dropdown.possible_values.observer is observer


def test_after_set_observer_called_once_with_root():
    form, *_ = _tree()
    calls = []
    form.set_observer(DefinitionObserver(after_set_observer=calls.append))
    assert calls == [form]


def test_detach_observer():
    form, name, *_ = _tree()
    form.set_observer(DefinitionObserver())
    form.set_observer(None)
    assert name.observer is None


def test_observer_changed_callbacks():
    form, name, *_ = _tree()
    seen = []
    name.on_observer_changed(seen.append)
    observer = DefinitionObserver()
    form.set_observer(observer)
    name.off_observer_changed(seen.append)
    form.set_observer(None)
    assert seen == [observer]


def test_new_children_receive_current_observer():
    form, *_ = _tree()
    observer = DefinitionObserver()
    form.set_observer(observer)
    late = TextItemDefinition(data_path='id')
    form.set_children([late])
    assert late.observer is observer
    assert late.normalized_paths == ['%0%.id']


def test_details_reference_is_observed():
    reference = FormDefinition()
    button = OpenDetailsButtonDefinition(details_definition_reference=reference)
    table = TablePanelDefinition(details_definition_reference=FormDefinition())
    form = FormDefinition(children=[button, table])
    observer = DefinitionObserver()
    form.set_observer(observer)
    assert reference.observer is observer
    assert table.details_definition_reference.observer is observer
    # the table's reference starts a new hierarchy
    assert table.details_definition_reference.parent is None


class TestValidators:

    def test_validators_resolved_from_names(self):
        form, name, *_ = _tree()
        registry = {'required': bool, 'email': str}
        form.set_observer(DefinitionObserver(get_validator=registry.get))
        assert name.validators == [bool, str]

    def test_unknown_validator_names_are_skipped(self):
        form, name, *_ = _tree()
        form.set_observer(DefinitionObserver(get_validator={'email': str}.get))
        assert name.validators == [str]

    def test_validators_reset_without_capability(self):
        form, name, *_ = _tree()
        form.set_observer(DefinitionObserver(get_validator={'required': bool}.get))
        form.set_observer(DefinitionObserver())
        assert name.validators == []

    def test_container_collects_child_validators(self):
        form, name, dropdown, _ = _tree()
        dropdown.validator_class = 'required'
        form.set_observer(DefinitionObserver(get_validator={'required': bool, 'email': str}.get))
        assert form.get_validators() == [bool, str, bool]

    def test_leaf_without_validators(self):
        assert TextItemDefinition().get_validators() == []


class TestTranslate:

    def test_translate_through_observer(self):
        item = TextItemDefinition(label='greeting')
        item.set_observer(DefinitionObserver(translate=str.upper))
        assert item.translate(item.label) == 'GREETING'

    def test_translate_passthrough(self):
        assert TextItemDefinition().translate('greeting') == 'greeting'


def test_capability_lookup():
    observer = DefinitionObserver(translate=str.upper)
    assert capability(observer, 'translate') is str.upper
    assert capability(observer, 'open_definition') is None
    assert capability(None, 'translate') is None

    class PartialObserver:
        get_default_rtc = staticmethod(lambda: 'rtc')
        translate = 'not callable'

    assert capability(PartialObserver(), 'get_default_rtc')() == 'rtc'
    assert capability(PartialObserver(), 'translate') is None


@pytest.mark.asyncio
async def test_settle_plain_and_awaitable():
    async def produce():
        return 42

    assert await settle(42) == 42
    assert await settle(produce()) == 42


@pytest.mark.asyncio
async def test_open_details_without_capability_reports(customer_data, diagnostics):
    button = OpenDetailsButtonDefinition(details_definition_reference=FormDefinition())
    assert await button.open_details(customer_data) is None
    assert diagnostics[-1].kind is DiagnosticKind.CAPABILITY_MISSING


@pytest.mark.asyncio
async def test_open_details_opens_resolved_definition(customer_data):
    details = FormDefinition(data_path='%0%')
    button = OpenDetailsButtonDefinition(data_path='%1%', details_definition_reference=details)
    opened = []

    async def open_definition(definition, data):
        opened.append((definition, data))
        return 'opened'

    button.set_observer(DefinitionObserver(open_definition=open_definition))
    assert await button.open_details(customer_data) == 'opened'
    assert opened == [(details, [customer_data[1]])]


def test_parented_workflow_reference_is_visited_once():
    workflow = DefinitionWorkflow(workflow_fqn='app.Details')
    button = OpenDetailsButtonDefinition(details_definition_reference=workflow)
    form = FormDefinition(children=[button])
    seen = []
    workflow.on_observer_changed(seen.append)

    observer = DefinitionObserver()
    form.set_observer(observer)

    assert seen == [observer]
    assert sum(1 for definition in form.walk() if definition is workflow) == 1


def test_unparented_button_still_observes_its_workflow_reference():
    workflow = DefinitionWorkflow(workflow_fqn='app.Details')
    button = OpenDetailsButtonDefinition(details_definition_reference=workflow)
    observer = DefinitionObserver()
    button.set_observer(observer)
    assert workflow.observer is observer
