import re

from routedoc import fields as f
from routedoc.openapi_parts.rules import extract


def test_number_defaults_to_float():
    assert extract(f.number()) == {'type': 'number', 'format': 'float'}


def test_number_precision_is_double():
    assert extract(f.number().precision(2)) == {'type': 'number', 'format': 'double'}


def test_positive_integer():
    assert extract(f.number().positive().integer()) == {'type': 'integer', 'minimum': 1}


def test_negative_and_explicit_limits():
    assert extract(f.number().negative()) == {'type': 'number', 'format': 'float', 'maximum': -1}
    out = extract(f.number().integer().min(5).max(10))
    assert out == {'type': 'integer', 'minimum': 5, 'maximum': 10}


def test_explicit_min_wins_over_sign():
    out = extract(f.number().positive().min(3))
    assert out['minimum'] == 3


def test_ref_limits_resolve_from_meta_or_zero():
    resolved = f.number().min(f.ref('start')).meta(refValues={'start': 7})
    assert extract(resolved)['minimum'] == 7
    unresolved = f.number().max(f.ref('end'))
    assert extract(unresolved)['maximum'] == 0


def test_number_enum_ignores_other_types():
    node = f.number().valid(1, 2, 'three', True)
    assert extract(node)['enum'] == [1, 2]


def test_number_invalids_become_not_enum():
    assert extract(f.number().invalid(0))['not'] == {'enum': [0]}


def test_string_alphanum_and_token():
    assert extract(f.string().alphanum())['pattern'] == '^[a-zA-Z0-9]*$'
    assert extract(f.string().alphanum().token())['pattern'] == '^[a-zA-Z0-9_]*$'


def test_alphanum_case_only_applies_when_strict():
    lenient = f.string().alphanum().lowercase()
    strict = f.string().alphanum().uppercase().prefs(convert=False)
    assert extract(lenient)['pattern'] == '^[a-zA-Z0-9]*$'
    assert extract(strict)['pattern'] == '^[A-Z0-9]*$'


def test_explicit_pattern_uses_regex_source():
    assert extract(f.string().pattern(re.compile(r'^\d{3}$')))['pattern'] == r'^\d{3}$'
    assert extract(f.string().alphanum().pattern('^ab$'))['pattern'] == '^ab$'


def test_format_clears_pattern_regardless_of_order():
    before = extract(f.string().email().pattern('^x+$'))
    after = extract(f.string().pattern('^x+$').email())
    for out in (before, after):
        assert out['format'] == 'email'
        assert 'pattern' not in out


def test_string_formats():
    assert extract(f.string().iso_date())['format'] == 'date-time'
    assert extract(f.string().guid())['format'] == 'uuid'
    assert extract(f.string().token().uuid()) == {'type': 'string', 'format': 'uuid'}


def test_string_length_rules():
    assert extract(f.string().min(2).max(8)) == {'type': 'string', 'minLength': 2, 'maxLength': 8}
    assert extract(f.string().length(4)) == {'type': 'string', 'minLength': 4, 'maxLength': 4}


def test_string_enum_requires_only_flag():
    assert 'enum' not in extract(f.string().allow('a', 'b'))
    assert extract(f.string().valid('a', 'b', 3))['enum'] == ['a', 'b']


def test_binary():
    assert extract(f.binary()) == {'type': 'string', 'format': 'binary'}
    assert extract(f.binary().encoding('base64').max(64)) == {'type': 'string', 'format': 'byte', 'maxLength': 64}


def test_date():
    assert extract(f.date()) == {'type': 'string', 'format': 'date-time'}
    assert extract(f.date().format('YYYY-MM-DD')) == {'type': 'string', 'format': 'date'}


def test_boolean_and_any():
    assert extract(f.boolean()) == {'type': 'boolean'}
    assert extract(f.any_()) == {}
    assert extract(f.file()) == {'type': 'file', 'in': 'formData'}


def test_any_enum_accepts_strings_and_numbers():
    assert extract(f.any_().valid('a', 1, None))['enum'] == ['a', 1]
