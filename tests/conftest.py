"""Pytest fixtures for the tracker application."""

import httpx
import pytest


@pytest.fixture
def app(tmp_path):
    """Create test application with a local-storage board in tmp_path."""
    from donetracker.config import TestConfig
    from tracker_app import create_app

    class Config(TestConfig):
        TASKS_FILE = str(tmp_path / 'tasks.json')

    app = create_app(Config)
    app.config['TESTING'] = True

    yield app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def db(app):
    """Create test database."""
    from donetracker.models import db as _db

    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def api_client(app):
    """httpx client that sends requests straight into the WSGI app."""
    with httpx.Client(transport=httpx.WSGITransport(app=app), base_url='http://testserver') as client:
        yield client
