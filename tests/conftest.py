import pytest
from fastapi.testclient import TestClient

from expense_api.core.config import Settings
from expense_api.main import create_app


def make_expenses():
    return [
        {"name": "coffee", "amount": "4.50", "type_id": "3", "category": "Food"},
        {"name": "rent", "amount": "1200.00", "type_id": "1", "category": "Housing"},
        {"name": "bus pass", "amount": "75.25", "type_id": "7", "category": "Transport"},
    ]


def build_settings(tmp_path, **overrides) -> Settings:
    values = {
        "data_dir": tmp_path,
        "db_filename": "test.sqlite3",
        "environment": "test",
    }
    values.update(overrides)
    settings = Settings(**values)
    settings.init_post_load()
    return settings


@pytest.fixture
def settings(tmp_path):
    return build_settings(tmp_path)


@pytest.fixture
def app(settings):
    application = create_app(settings_override=settings)
    yield application
    application.state.db.close()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def db(app):
    return app.state.db


@pytest.fixture
def seeded(db):
    """Insert the fixture expenses and return the stored rows (ids 1..3)."""
    return [db.insert_expense(e) for e in make_expenses()]
