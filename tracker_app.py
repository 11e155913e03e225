import atexit
import logging
import sys
from pathlib import Path

from flask import Flask, request
from flask_cors import CORS
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from donetracker.api.routes import api
from donetracker.board import TaskBoard, difficulty_color, format_date, format_time
from donetracker.errors import register_error_handlers
from donetracker.main.routes import main as main_bp
from donetracker.models import db
from donetracker.sources import build_task_source

logger = logging.getLogger('donetracker')


def create_app(config_class=None):
    app = Flask(__name__, template_folder='donetracker/templates')

    if config_class is None:
        from donetracker.config import Config

        config_class = Config
    app.config.from_object(config_class)

    if not app.config.get('SQLALCHEMY_DATABASE_URI'):
        db_path = Path(app.root_path) / 'tasks.db'
        app.config['SQLALCHEMY_DATABASE_URI'] = f'sqlite:///{db_path}'

    CORS(app, resources={r'/api/*': {'origins': app.config['CORS_ORIGINS']}})

    app.register_blueprint(api)
    app.register_blueprint(main_bp)
    register_error_handlers(app)

    app.add_template_filter(format_time)
    app.add_template_filter(format_date)
    app.add_template_filter(difficulty_color)

    @app.before_request
    def log_request():
        logger.info(f'{request.method} {request.path}')

    db.init_app(app)

    source = build_task_source(app.config, app.instance_path)
    atexit.register(source.close)
    app.extensions['task_board'] = TaskBoard(source)

    _configure_logging()

    with app.app_context():
        db.create_all()
    return app


def _configure_logging():
    logging.getLogger('donetracker').setLevel(logging.DEBUG)
    logging.getLogger('werkzeug').setLevel(logging.WARNING)
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)


def setup_logging(level=logging.INFO):
    """Single stream handler on the root logger. Call once, before create_app."""
    root = logging.getLogger()
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(
        fmt='%(asctime)s %(levelname)s %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    ))
    root.addHandler(handler)


def check_database(app):
    with app.app_context():
        db.session.execute(text('SELECT 1'))


def main():
    setup_logging()
    try:
        app = create_app()
        check_database(app)
    except SQLAlchemyError:
        logger.exception('Failed to start server')
        sys.exit(1)
    logger.info('Database connected successfully')
    logger.info(f"API server running on port {app.config['PORT']}")
    app.run(port=app.config['PORT'], debug=app.config['DEBUG'])


if __name__ == '__main__':
    main()
