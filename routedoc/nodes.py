"""Schema node model.

A `SchemaNode` describes the validation rules of one field: its kind, an
ordered rule list, presence/label/default flags, allowed and denied values,
children (objects), item alternatives (arrays), conditional branches and free
form metadata. Nodes are immutable; every builder method returns a new node,
so a node can safely be shared between routes and used as an identity key.

Usage:
    from routedoc import fields as f
    price = f.number().positive().required().description('Unit price')
    product = f.object_({'name': f.string().required(), 'price': price}).label('Product')
"""
from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

from .errors import NoSchemaProvided, NotASchemaError


@dataclass(frozen=True)
class Ref:
    """Reference to a sibling field, usable as a rule limit (e.g. `min(Ref('start'))`)."""
    key: str

    def __str__(self) -> str:
        return f"ref:{self.key}"


@dataclass(frozen=True)
class Rule:
    name: str
    args: Dict[str, Any] = field(default_factory=dict)

    def arg(self, key: str, default: Any = None) -> Any:
        return self.args.get(key, default)


@dataclass(frozen=True, eq=False)
class SwitchCase:
    is_: Any = None
    then: Optional['SchemaNode'] = None
    otherwise: Optional['SchemaNode'] = None


@dataclass(frozen=True, eq=False)
class Conditional:
    condition: Any = None
    is_: Any = None
    then: Optional['SchemaNode'] = None
    otherwise: Optional['SchemaNode'] = None
    switch: Tuple[SwitchCase, ...] = ()

    def branches(self):
        """Yield branch nodes in declaration order: then, otherwise, then each switch case."""
        for node in (self.then, self.otherwise):
            if node is not None:
                yield node
        for case in self.switch:
            for node in (case.then, case.otherwise):
                if node is not None:
                    yield node


Match = Union['SchemaNode', Conditional]


@dataclass(frozen=True, eq=False)
class SchemaNode:
    kind: str
    rules: Tuple[Rule, ...] = ()
    flags: Dict[str, Any] = field(default_factory=dict)
    valids: Tuple[Any, ...] = ()
    invalids: Tuple[Any, ...] = ()
    children: Tuple[Tuple[str, 'SchemaNode'], ...] = ()
    key_pattern: Optional[Tuple[str, 'SchemaNode']] = None
    items: Tuple['SchemaNode', ...] = ()
    matches: Tuple[Match, ...] = ()
    whens: Tuple[Conditional, ...] = ()
    examples: Tuple[Any, ...] = ()
    metadata: Dict[str, Any] = field(default_factory=dict)

    # -------- introspection --------
    @property
    def presence(self) -> str:
        return self.flags.get('presence', 'optional')

    def rule(self, name: str) -> Optional[Rule]:
        for r in self.rules:
            if r.name == name:
                return r
        return None

    def has_rule(self, name: str) -> bool:
        return self.rule(name) is not None

    def __repr__(self) -> str:
        label = self.flags.get('label')
        return f"<SchemaNode {self.kind}{' ' + label if label else ''}>"

    # -------- internal copy helpers --------
    def _with(self, **changes) -> 'SchemaNode':
        return replace(self, **changes)

    def _flag(self, name: str, value: Any) -> 'SchemaNode':
        return self._with(flags={**self.flags, name: value})

    def _rule(self, name: str, **args) -> 'SchemaNode':
        rules = tuple(r for r in self.rules if r.name != name)
        return self._with(rules=rules + (Rule(name, args),))

    def _expect(self, method: str, *kinds: str) -> None:
        if self.kind not in kinds:
            raise TypeError(f"{method}() is not available on {self.kind} schemas")

    # -------- presence / documentation --------
    def required(self) -> 'SchemaNode':
        return self._flag('presence', 'required')

    def optional(self) -> 'SchemaNode':
        return self._flag('presence', 'optional')

    def forbidden(self) -> 'SchemaNode':
        return self._flag('presence', 'forbidden')

    def label(self, name: str) -> 'SchemaNode':
        return self._flag('label', name)

    def description(self, text: str) -> 'SchemaNode':
        return self._flag('description', text)

    def default(self, value: Any) -> 'SchemaNode':
        return self._flag('default', value)

    def example(self, *values: Any) -> 'SchemaNode':
        return self._with(examples=self.examples + tuple(values))

    def meta(self, mapping: Optional[Mapping[str, Any]] = None, **kwargs) -> 'SchemaNode':
        merged = dict(self.metadata)
        merged.update(mapping or {})
        merged.update(kwargs)
        return self._with(metadata=merged)

    def prefs(self, **preferences) -> 'SchemaNode':
        return self._with(flags={**self.flags, **preferences})

    # -------- allowed values --------
    def allow(self, *values: Any) -> 'SchemaNode':
        invalids = tuple(v for v in self.invalids if v not in values)
        return self._with(valids=self.valids + tuple(values), invalids=invalids)

    def valid(self, *values: Any) -> 'SchemaNode':
        return self.allow(*values)._flag('only', True)

    def invalid(self, *values: Any) -> 'SchemaNode':
        valids = tuple(v for v in self.valids if v not in values)
        return self._with(invalids=self.invalids + tuple(values), valids=valids)

    # -------- shared size rules --------
    def min(self, limit: Union[int, float, Ref]) -> 'SchemaNode':
        self._expect('min', 'string', 'number', 'binary', 'array')
        return self._rule('min', limit=limit)

    def max(self, limit: Union[int, float, Ref]) -> 'SchemaNode':
        self._expect('max', 'string', 'number', 'binary', 'array')
        return self._rule('max', limit=limit)

    def length(self, limit: int) -> 'SchemaNode':
        self._expect('length', 'string', 'binary', 'array')
        return self._rule('length', limit=limit)

    # -------- number --------
    def integer(self) -> 'SchemaNode':
        self._expect('integer', 'number')
        return self._rule('integer')

    def precision(self, limit: int) -> 'SchemaNode':
        self._expect('precision', 'number')
        return self._rule('precision', limit=limit)

    def positive(self) -> 'SchemaNode':
        self._expect('positive', 'number')
        return self._rule('sign', sign='positive')

    def negative(self) -> 'SchemaNode':
        self._expect('negative', 'number')
        return self._rule('sign', sign='negative')

    # -------- string --------
    def alphanum(self) -> 'SchemaNode':
        self._expect('alphanum', 'string')
        return self._rule('alphanum')

    def token(self) -> 'SchemaNode':
        self._expect('token', 'string')
        return self._rule('token')

    def email(self) -> 'SchemaNode':
        self._expect('email', 'string')
        return self._rule('email')

    def iso_date(self) -> 'SchemaNode':
        self._expect('iso_date', 'string')
        return self._rule('isoDate')

    def guid(self) -> 'SchemaNode':
        self._expect('guid', 'string')
        return self._rule('guid')

    uuid = guid

    def pattern(self, regex) -> 'SchemaNode':
        self._expect('pattern', 'string')
        return self._rule('pattern', regex=regex)

    def lowercase(self) -> 'SchemaNode':
        self._expect('lowercase', 'string')
        return self._rule('case', direction='lower')

    def uppercase(self) -> 'SchemaNode':
        self._expect('uppercase', 'string')
        return self._rule('case', direction='upper')

    # -------- binary / date --------
    def encoding(self, name: str) -> 'SchemaNode':
        self._expect('encoding', 'binary')
        return self._flag('encoding', name)

    def format(self, fmt: str) -> 'SchemaNode':
        self._expect('format', 'date')
        return self._flag('format', fmt)

    # -------- object --------
    def keys(self, mapping: Optional[Mapping[str, Any]] = None, **kwargs) -> 'SchemaNode':
        self._expect('keys', 'object')
        children = dict(self.children)
        for key, value in {**(mapping or {}), **kwargs}.items():
            children[key] = as_node(value)
        return self._with(children=tuple(children.items()))

    def pattern_keys(self, regex, node: Any) -> 'SchemaNode':
        self._expect('pattern_keys', 'object')
        return self._with(key_pattern=(getattr(regex, 'pattern', regex), as_node(node)))

    def unknown(self, allow: bool = True) -> 'SchemaNode':
        self._expect('unknown', 'object')
        return self._flag('unknown', allow)

    # -------- array --------
    def items_of(self, *nodes: Any) -> 'SchemaNode':
        self._expect('items_of', 'array')
        return self._with(items=self.items + tuple(as_node(n) for n in nodes))

    def unique(self) -> 'SchemaNode':
        self._expect('unique', 'array')
        return self._rule('unique')

    # -------- alternatives / conditionals --------
    def try_(self, *nodes: Any) -> 'SchemaNode':
        self._expect('try_', 'alternatives')
        return self._with(matches=self.matches + tuple(as_node(n) for n in nodes))

    def conditional(self, condition: Any, *, is_: Any = None, then: Any = None, otherwise: Any = None,
                    switch: Iterable[Mapping[str, Any]] = ()) -> 'SchemaNode':
        self._expect('conditional', 'alternatives')
        return self._with(matches=self.matches + (_conditional(condition, is_, then, otherwise, switch),))

    def match(self, mode: str) -> 'SchemaNode':
        self._expect('match', 'alternatives')
        if mode not in ('any', 'one', 'all'):
            raise ValueError(f"match mode must be any, one or all (got {mode!r})")
        return self._flag('match', mode)

    def when(self, condition: Any, *, is_: Any = None, then: Any = None, otherwise: Any = None,
             switch: Iterable[Mapping[str, Any]] = ()) -> 'SchemaNode':
        return self._with(whens=self.whens + (_conditional(condition, is_, then, otherwise, switch),))


def _conditional(condition, is_, then, otherwise, switch) -> Conditional:
    cases = tuple(
        SwitchCase(
            is_=case.get('is'),
            then=as_node(case['then']) if case.get('then') is not None else None,
            otherwise=as_node(case['otherwise']) if case.get('otherwise') is not None else None,
        )
        for case in switch
    )
    return Conditional(
        condition=condition,
        is_=is_,
        then=as_node(then) if then is not None else None,
        otherwise=as_node(otherwise) if otherwise is not None else None,
        switch=cases,
    )


def as_node(value: Any) -> SchemaNode:
    """Coerce a node or a plain mapping of child nodes into a SchemaNode."""
    if isinstance(value, SchemaNode):
        return value
    if value is None:
        raise NoSchemaProvided()
    if isinstance(value, Mapping):
        return SchemaNode('object').keys(value)
    raise NotASchemaError(value)


__all__ = ['Ref', 'Rule', 'SwitchCase', 'Conditional', 'SchemaNode', 'as_node']
