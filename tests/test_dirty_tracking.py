"""Tests for edit tracking over the definition tree."""
from defbind import (
    ContainerDefinition,
    DropdownDefinition,
    FormDefinition,
    TextInputDefinition,
)


def _form():
    name = TextInputDefinition(data_path='name')
    city = TextInputDefinition(data_path='city')
    inner = ContainerDefinition(data_path='address', children=[city])
    form = FormDefinition(data_path='%1%', children=[name, inner])
    return form, inner, name, city


def test_fresh_tree_has_no_changes():
    form, *_ = _form()
    assert not form.has_data_changes()


def test_edit_marks_leaf_and_aggregates_upwards(customer_data):
    """Scenario: assign a new value, the whole ancestor chain reports changes."""
    form, inner, name, city = _form()
    assert city.resolve_assign_data(customer_data, 'Hamburg') is True
    assert customer_data[1].resolve('address.city') == 'Hamburg'

    assert city.dirty
    assert not inner.dirty
    assert inner.has_data_changes()
    assert form.has_data_changes()
    assert not name.has_data_changes()


def test_blank_edit_does_not_mark(customer_data):
    form, *_ = _form()
    email = TextInputDefinition(data_path='email')
    form.set_children(form.children + [email])
    assert email.resolve_assign_data(customer_data, None) is False
    assert not form.has_data_changes()


def test_same_value_does_not_mark(customer_data):
    form, _, name, _ = _form()
    name.resolve_assign_data(customer_data, 'Ada')
    assert not form.has_data_changes()


def test_clear_data_change_state(customer_data):
    form, inner, name, city = _form()
    name.resolve_assign_data(customer_data, 'Grace')
    city.resolve_assign_data(customer_data, 'Hamburg')
    form.set_data_changed()

    form.clear_data_change_state()
    assert not form.has_data_changes()
    assert not any(definition.dirty for definition in form.walk())


def test_replaced_children_no_longer_count(customer_data):
    form, _, name, _ = _form()
    name.resolve_assign_data(customer_data, 'Grace')
    assert form.has_data_changes()
    form.set_children([])
    assert not form.has_data_changes()


def test_dropdown_possible_values_are_owned():
    dropdown = DropdownDefinition(data_path='%0%.status')
    form = FormDefinition(children=[dropdown])
    dropdown.possible_values.set_data_changed()
    assert form.has_data_changes()


def test_child_of_another_container_is_not_adopted(caplog):
    child = TextInputDefinition(data_path='name')
    first = FormDefinition(children=[child])
    second = FormDefinition()
    second.set_children([child])

    assert second.children == []
    assert first.children == [child]
    assert 'already a child of' in caplog.text

    child.set_data_changed()
    assert first.has_data_changes()
    assert not second.has_data_changes()


def test_children_and_registry_stay_consistent():
    shared = TextInputDefinition(data_path='name')
    FormDefinition(children=[shared])
    own = TextInputDefinition(data_path='city')
    form = FormDefinition(children=[shared, own])
    assert form.children == [own]
    assert form.sub_definitions == [own]
