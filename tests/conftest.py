import pytest

from repladder import create_app
from repladder.db import init_db


@pytest.fixture
def app(tmp_path):
    app = create_app(
        {
            "TESTING": True,
            "DATABASE": str(tmp_path / "test.db"),
            "LOG_LEVEL": "WARNING",
        }
    )
    with app.app_context():
        init_db()
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def ctx(app):
    """App-Kontext für direkte Aufrufe der Model-Funktionen."""
    with app.app_context():
        yield app
