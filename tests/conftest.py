import pytest

from settleup.app import create_app
from settleup.config import Config


class TestingConfig(Config):
    CORS_ORIGINS = "*"
    DEFAULT_CURRENCY = "EUR"
    DEFAULT_LOCALE = "en-US"
    LOG_LEVEL = "DEBUG"


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
