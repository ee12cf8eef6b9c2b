import pytest

from routedoc import fields as f
from routedoc.errors import (
    CyclicSchemaError,
    NestedOverrideError,
    NoSchemaProvided,
    NotASchemaError,
    UnrecognizedType,
)
from routedoc.nodes import SchemaNode
from routedoc.openapi_parts.compiler import compile_schema


def _schema(node, known=None):
    result = compile_schema(node, known)
    assert result is not False
    return result.schema


def test_unlabeled_positive_integer_compiles_inline():
    assert _schema(f.number().positive().integer()) == {'type': 'integer', 'minimum': 1}


def test_missing_schema_rejected():
    with pytest.raises(NoSchemaProvided):
        compile_schema(None)
    with pytest.raises(NoSchemaProvided):
        compile_schema({})


def test_non_schema_rejected():
    with pytest.raises(NotASchemaError):
        compile_schema(42)


def test_unrecognized_kind():
    with pytest.raises(UnrecognizedType):
        compile_schema(SchemaNode('tuple'))


def test_forbidden_compiles_to_false():
    assert compile_schema(f.string().forbidden()) is False


def test_plain_mapping_is_an_object():
    out = _schema({'name': f.string().required()})
    assert out == {
        'type': 'object',
        'properties': {'name': {'type': 'string'}},
        'required': ['name'],
        'additionalProperties': False,
    }


def test_object_omits_forbidden_children_everywhere():
    node = f.object_({
        'a': f.string().required(),
        'secret': f.string().required().forbidden(),
        'b': f.number().integer().required(),
    })
    out = _schema(node)
    assert list(out['properties']) == ['a', 'b']
    assert out['required'] == ['a', 'b']


def test_object_unknown_keys_leave_additional_properties_open():
    out = _schema(f.object_({'a': f.string()}).unknown(True))
    assert 'additionalProperties' not in out
    assert 'required' not in out


def test_object_key_pattern_becomes_additional_properties():
    out = _schema(f.object_().pattern_keys(r'^\w+$', f.number().integer()))
    assert out == {'type': 'object', 'properties': {}, 'additionalProperties': {'type': 'integer'}}


def test_key_pattern_ignored_when_children_declared():
    node = f.object_({'a': f.string()}).pattern_keys(r'^\w+$', f.number())
    assert _schema(node)['additionalProperties'] is False


def test_array_single_item_and_limits():
    out = _schema(f.array(f.string()).min(1).max(3).unique())
    assert out == {'type': 'array', 'items': {'type': 'string'}, 'minItems': 1, 'maxItems': 3, 'uniqueItems': True}


def test_array_length_sets_both_limits():
    out = _schema(f.array(f.number().integer()).length(2))
    assert out['minItems'] == out['maxItems'] == 2


def test_array_without_items_is_open():
    assert _schema(f.array())['items'] == {}


def test_array_alternatives_deduplicated():
    out = _schema(f.array(f.string(), f.number().integer(), f.string(), f.boolean().forbidden()))
    assert out['items'] == {'oneOf': [{'type': 'string'}, {'type': 'integer'}]}


def test_alternatives_default_any_of():
    out = _schema(f.alternatives(f.string(), f.number().integer()))
    assert out == {'anyOf': [{'type': 'string'}, {'type': 'integer'}]}


def test_alternatives_match_mode_and_required_marker():
    out = _schema(f.alternatives(f.string().required(), f.boolean()).match('one'))
    assert out == {'oneOf': [{'type': 'string', 'x-required': True}, {'type': 'boolean'}]}


def test_alternatives_conditional_branches():
    node = f.alternatives().conditional('kind', is_='a', then=f.string(), otherwise=f.number().integer())
    assert _schema(node) == {'anyOf': [{'type': 'string'}, {'type': 'integer'}]}


def test_empty_alternatives_are_unconstrained():
    assert _schema(f.alternatives(f.string().forbidden())) == {}


def test_single_when_uses_one_of_and_marks_required_branch():
    node = f.any_().when('type', is_='a', then=f.string().required(), otherwise=f.number().integer())
    assert _schema(node) == {
        'oneOf': [
            {'type': 'string', 'x-required': True},
            {'type': 'integer'},
        ]
    }


def test_multiple_whens_use_any_of_and_include_switch_branches():
    node = (
        f.any_()
        .when('a', is_=1, then=f.string())
        .when('b', switch=[{'is': 1, 'then': f.boolean()}, {'is': 2, 'then': f.string(), 'otherwise': f.date()}])
    )
    out = _schema(node)
    assert out == {'anyOf': [{'type': 'string'}, {'type': 'boolean'}, {'type': 'string', 'format': 'date-time'}]}


def test_annotations_in_order():
    node = (
        f.string().allow(None).description('Display name').example('Ada').label('Name').default('anon')
    )
    out = _schema(node)
    assert list(out) == ['type', 'nullable', 'description', 'example', 'title', 'default']
    assert out['nullable'] is True


def test_multiple_examples():
    assert _schema(f.string().example('a', 'b'))['examples'] == ['a', 'b']


def test_falsy_defaults_kept_callables_dropped():
    assert _schema(f.boolean().default(False))['default'] is False
    assert _schema(f.number().integer().default(0))['default'] == 0
    assert 'default' not in _schema(f.string().default(lambda: 'generated'))


def test_swagger_meta_is_merged_last():
    out = _schema(f.string().description('orig').meta(swagger={'description': 'override', 'x-extra': 1}))
    assert out == {'type': 'string', 'description': 'override', 'x-extra': 1}


def test_swagger_override_replaces_schema():
    node = f.string().email().meta(swagger={'type': 'string', 'format': 'idn-email'}, swaggerOverride=True)
    assert _schema(node) == {'type': 'string', 'format': 'idn-email'}


def test_schema_override_compiles_replacement():
    node = f.any_().meta(schemaOverride=f.number().integer())
    assert _schema(node) == {'type': 'integer'}


def test_nested_schema_override_rejected():
    inner = f.string().meta(schemaOverride=f.number())
    with pytest.raises(NestedOverrideError):
        compile_schema(f.any_().meta(schemaOverride=inner))


def test_class_name_registers_component_and_returns_ref():
    address = f.object_({'city': f.string().required()}).meta(className='Address')
    result = compile_schema(f.object_({'home': address, 'work': address}))
    assert result.schema['properties']['home'] == {'$ref': '#/components/schemas/Address'}
    assert result.schema['properties']['work'] == {'$ref': '#/components/schemas/Address'}
    assert list(result.components['schemas']) == ['Address']


def test_known_class_name_short_circuits():
    node = f.string().meta(className='Code', classTarget='parameters')
    result = compile_schema(node, {'parameters': {'Code': {'type': 'string'}}})
    assert result.schema == {'$ref': '#/components/parameters/Code'}
    assert result.components == {}


def test_cyclic_node_rejected():
    node = f.object_()
    object.__setattr__(node, 'children', (('self', node),))
    with pytest.raises(CyclicSchemaError):
        compile_schema(node)


def test_builder_rejects_rules_for_other_kinds():
    with pytest.raises(TypeError):
        f.boolean().email()
