"""Tests for leaf and container visibility."""
import pytest

from defbind import (
    ContainerDefinition,
    DataObject,
    Definition,
    TextItemDefinition,
    hides_any,
    is_empty,
    is_undefined,
)


@pytest.mark.parametrize('value', [None, '', [], {}, ()])
def test_empty_values(value):
    assert is_empty(value)


@pytest.mark.parametrize('value', [0, False, 'x', [None], {'a': 1}, 3.5])
def test_non_empty_values(value):
    assert not is_empty(value)


def test_undefined_is_only_none():
    assert is_undefined(None)
    assert not is_undefined('')
    assert not is_undefined(0)


def test_hides_any():
    assert hides_any(['a', ''], hide_if_empty=True, hide_if_undefined=False)
    assert not hides_any(['a', ''], hide_if_empty=False, hide_if_undefined=True)
    assert hides_any([None], hide_if_empty=False, hide_if_undefined=True)
    assert not hides_any([], hide_if_empty=True, hide_if_undefined=True)


class TestLeafVisibility:

    def test_hidden_flag(self, customer_data):
        assert TextItemDefinition(hidden=True).is_hidden_for(customer_data)

    def test_visible_without_flags(self, customer_data):
        assert not TextItemDefinition(data_path='%1%.email').is_hidden_for(customer_data)

    def test_hide_if_empty(self, customer_data):
        item = TextItemDefinition(data_path='%1%.email', hide_if_empty=True)
        assert item.is_hidden_for(customer_data)

    def test_hide_if_empty_any_of_several_paths(self, customer_data):
        item = TextItemDefinition(data_path='%1%.name, %1%.email', hide_if_empty=True)
        assert item.is_hidden_for(customer_data)

    def test_hide_if_undefined(self, customer_data):
        item = TextItemDefinition(data_path='%0%.note', hide_if_undefined=True)
        assert item.is_hidden_for(customer_data)
        email = TextItemDefinition(data_path='%1%.email', hide_if_undefined=True)
        assert not email.is_hidden_for(customer_data)

    def test_zero_is_not_empty(self, customer_data):
        item = TextItemDefinition(data_path='%0%.positions.1.amount', hide_if_empty=True)
        assert not item.is_hidden_for(customer_data)

    def test_no_data_path_ignores_data_flags(self):
        item = TextItemDefinition(hide_if_empty=True, hide_if_undefined=True)
        assert not item.is_hidden_for([])


class TestContainerVisibility:

    def test_hide_if_empty_with_all_children_hidden(self, customer_data):
        """Scenario: both children hidden for the data -> container hidden."""
        container = ContainerDefinition(
            hide_if_empty=True,
            children=[
                TextItemDefinition(data_path='%1%.email', hide_if_empty=True),
                TextItemDefinition(hidden=True),
            ],
        )
        assert container.is_hidden_for(customer_data)

    def test_visible_with_one_visible_child(self, customer_data):
        container = ContainerDefinition(
            hide_if_empty=True,
            children=[
                TextItemDefinition(data_path='%1%.email', hide_if_empty=True),
                TextItemDefinition(data_path='%1%.name'),
            ],
        )
        assert not container.is_hidden_for(customer_data)

    def test_without_hide_if_empty_children_do_not_matter(self, customer_data):
        container = ContainerDefinition(children=[TextItemDefinition(hidden=True)])
        assert not container.is_hidden_for(customer_data)

    def test_empty_container_with_hide_if_empty(self, customer_data):
        assert ContainerDefinition(hide_if_empty=True).is_hidden_for(customer_data)

    def test_own_hidden_flag(self, customer_data):
        container = ContainerDefinition(hidden=True, children=[TextItemDefinition(data_path='%1%.name')])
        assert container.is_hidden_for(customer_data)

    def test_visibility_follows_data(self):
        container = ContainerDefinition(
            data_path='%0%',
            hide_if_empty=True,
            children=[TextItemDefinition(data_path='email', hide_if_empty=True)],
        )
        assert container.is_hidden_for([DataObject({'email': ''})])
        assert not container.is_hidden_for([DataObject({'email': 'a@b.c'})])

    def test_visibility_follows_replaced_children(self, customer_data):
        container = ContainerDefinition(hide_if_empty=True, children=[TextItemDefinition(hidden=True)])
        assert container.is_hidden_for(customer_data)
        container.set_children([TextItemDefinition(data_path='%1%.name')])
        assert not container.is_hidden_for(customer_data)

    def test_nested_containers(self, customer_data):
        inner = ContainerDefinition(hide_if_empty=True, children=[TextItemDefinition(hidden=True)])
        outer = ContainerDefinition(hide_if_empty=True, children=[inner])
        assert outer.is_hidden_for(customer_data)


def test_plain_definition_child_counts_as_visible(customer_data):
    container = ContainerDefinition(hide_if_empty=True, children=[Definition(data_path='%1%.email')])
    assert not Definition().is_hidden_for(customer_data)
    assert not container.is_hidden_for(customer_data)
