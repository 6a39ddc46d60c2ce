import pytest

from sitegate.domain_token import hash_token

SITE_TOKEN = "3f1c9a7e0b2d4c68a5e9f7b1d3c5e7a9"
API_KEY = "test-api-key"


@pytest.fixture
def site_token():
    return SITE_TOKEN


@pytest.fixture
def stored_hash():
    return hash_token(SITE_TOKEN)


@pytest.fixture
def api_key():
    return API_KEY
