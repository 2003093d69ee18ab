import pytest
from fastapi.testclient import TestClient

from storefront.app import create_app


@pytest.fixture()
def client():
    return TestClient(create_app(init_domain=False))
