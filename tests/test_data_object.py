"""Tests for the dict-backed data object."""
from defbind import DataObject, DataObjectLike, decode_data


def test_resolve_dotted_path(customer_data):
    order, customer = customer_data
    assert customer.resolve('name') == 'Ada'
    assert customer.resolve('address.city') == 'Berlin'
    assert order.resolve('positions.1.name') == 'Paper'


def test_resolve_empty_path_returns_object(customer_data):
    customer = customer_data[1]
    assert customer.resolve('') is customer


def test_resolve_missing_returns_none(customer_data):
    order = customer_data[0]
    assert order.resolve('missing') is None
    assert order.resolve('missing.deeper') is None
    assert order.resolve('positions.7.name') is None
    assert order.resolve('positions.x') is None


def test_resolve_head():
    obj = DataObject({'abc': DataObject({'def': [1, 2, DataObject({'ghi': 'x'})]})})
    head = obj.resolve_head('abc.def.2.ghi')
    assert head.head == 'abc.def.2'
    assert head.tail == 'ghi'
    assert head.value.resolve('ghi') == 'x'

    first = obj.resolve_head('abc.def', recursively=False)
    assert first.head == 'abc'
    assert first.tail == 'def'


def test_resolve_assign(customer_data):
    order, customer = customer_data
    customer.resolve_assign('address.city', 'Hamburg')
    assert customer.resolve('address.city') == 'Hamburg'

    order.resolve_assign('positions.0', 'replaced')
    assert order.resolve('positions.0') == 'replaced'

    customer.resolve_assign('nickname', 'A.')
    assert customer.data['nickname'] == 'A.'


def test_resolve_assign_into_plain_dict():
    obj = DataObject({'settings': {'color': 'red'}})
    obj.resolve_assign('settings.color', 'blue')
    assert obj.data['settings'] == {'color': 'blue'}


def test_resolve_delete(customer_data):
    customer = customer_data[1]
    customer.resolve_delete('address.zip')
    assert 'zip' not in customer.resolve('address').data


def test_clone_is_deep(customer_data):
    customer = customer_data[1]
    clone = customer.clone()
    clone.resolve_assign('address.city', 'Paris')
    assert customer.resolve('address.city') == 'Berlin'
    assert clone == DataObject({
        'name': 'Ada',
        'email': '',
        'address': DataObject({'city': 'Paris', 'zip': '10115'}),
    })


def test_decode_and_encode():
    json_data = {
        '$meta': {'fqn': 'app.Customer'},
        'name': 'Ada',
        'address': {'$meta': {'fqn': 'app.Address'}, 'city': 'Berlin'},
        'tags': [{'label': 'vip'}],
    }
    obj = DataObject.decode(json_data)
    assert obj.fqn == 'app.Customer'
    assert isinstance(obj.resolve('address'), DataObject)
    assert obj.resolve('tags.0.label') == 'vip'
    assert obj.encode() == json_data


def test_decode_data_keeps_positions():
    data = decode_data([{'a': 1}, None, {'b': 2}])
    assert data[0].resolve('a') == 1
    assert data[1] is None
    assert data[2].ident == '2'


def test_satisfies_protocol():
    assert isinstance(DataObject(), DataObjectLike)
