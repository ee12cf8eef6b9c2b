import pytest

from routedoc import MediaType, RequestBody, RouteSchema, compile_schema, fields as f
from routedoc.errors import RouteDefinitionError
from tests.sample_app import ProductSchema


class Thing(RouteSchema):
    @classmethod
    def tag(cls):
        return {'name': 'Things', 'description': 'Thing endpoints'}


def test_base_class_requires_overrides():
    with pytest.raises(NotImplementedError):
        RouteSchema.tag()
    with pytest.raises(NotImplementedError):
        Thing.schemas()
    with pytest.raises(NotImplementedError):
        Thing.routes()


@pytest.mark.parametrize('missing', ['path', 'method', 'summary'])
def test_create_route_requires_path_method_summary(missing):
    kwargs = {'path': '/thing', 'method': 'get', 'summary': 'Get a thing'}
    kwargs[missing] = ''
    with pytest.raises(RouteDefinitionError):
        Thing.create_route(**kwargs)


def test_create_route_normalizes():
    node = f.object_({'a': f.string()}).label('A')
    route = Thing.create_route(
        path='/thing', method='PATCH', summary='Patch',
        body={'content': {'application/json': node}},
        responses={200: {'description': 'ok', 'content': {'application/json': MediaType(node, examples={'e': {}})}}},
    )
    assert route.method == 'patch'
    assert route.tags == ('Things',)
    assert route.body == RequestBody(content={'application/json': MediaType(schema=node)})
    assert list(route.responses) == ['200']
    assert route.responses['200'].content['application/json'].examples == {'e': {}}


def test_media_object_without_schema_key_is_a_bare_schema():
    route = Thing.create_route(path='/x', method='get', summary='x',
                               responses={200: {'content': {'application/json': {'examples': f.string()}}}})
    media = route.responses['200'].content['application/json']
    assert media.examples is None
    assert set(media.schema) == {'examples'}


def test_paths_group_by_path_then_method():
    paths = ProductSchema.paths()
    assert list(paths)[:2] == ['/api-v1/product/get', '/api-v1/product/add']
    assert list(paths['/api-v1/product/upload']) == ['post']


def test_paths_reject_duplicates():
    class Dup(Thing):
        @classmethod
        def routes(cls):
            return [
                cls.create_route(path='/d', method='get', summary='one'),
                cls.create_route(path='/d', method='GET', summary='two'),
            ]

    with pytest.raises(RouteDefinitionError):
        Dup.paths()


def test_container_lookup():
    node = f.object_({'q': f.string()})
    route = Thing.create_route(path='/c', method='get', summary='c', query=node)
    assert route.container('query') is node
    assert route.container('headers') is None
    assert route.container('summary') is None


def test_tag_without_name_rejected():
    class Nameless(Thing):
        @classmethod
        def tag(cls):
            return {'description': 'no name'}

    with pytest.raises(RouteDefinitionError):
        Nameless.create_route(path='/n', method='get', summary='n')


def test_field_named_schema_stays_an_object():
    route = Thing.create_route(path='/s', method='post', summary='s',
                               body={'content': {'application/json': {'schema': f.string().required()}}})
    media = route.body.content['application/json']
    assert media.examples is None
    out = compile_schema(media.schema).schema
    assert out['type'] == 'object'
    assert out['properties'] == {'schema': {'type': 'string'}}
    assert out['required'] == ['schema']
