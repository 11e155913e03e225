"""Application configuration classes."""

import os

from dotenv import load_dotenv

load_dotenv()


def _float_or_none(value):
    return float(value) if value else None


class Config:
    """Base configuration."""

    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('DEBUG', 'false').lower() == 'true'
    PORT = int(os.getenv('PORT', '4000'))

    # Database; create_app falls back to tasks.db next to the app when unset
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')

    # Task board: "api" (server-backed) or "local" (JSON file, no server).
    # The api source calls back into this server at 127.0.0.1:PORT, which is
    # only right under the donetracker runner; set TASK_API_URL otherwise
    # (e.g. http://127.0.0.1:5000 under `flask run`).
    TASK_SOURCE = os.getenv('TASK_SOURCE', 'api')
    TASKS_FILE = os.getenv('TASKS_FILE')
    TASK_API_URL = os.getenv('TASK_API_URL')
    TASK_API_TIMEOUT = _float_or_none(os.getenv('TASK_API_TIMEOUT'))


class TestConfig(Config):
    """Test configuration."""

    TESTING = True
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    TASK_SOURCE = 'local'
