import os, sys, pytest
# Ensure project root is on path so 'routedoc', 'scripts' and 'tests' can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
from tests.sample_app import create_app, ProductSchema


@pytest.fixture(scope='session')
def app_instance():
    app = create_app({'TESTING': True})
    yield app


@pytest.fixture()
def client(app_instance):
    return app_instance.test_client()


@pytest.fixture(scope='session')
def product_doc():
    from routedoc import build_openapi_spec
    return build_openapi_spec(ProductSchema)['definition']
