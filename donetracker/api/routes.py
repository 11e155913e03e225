import logging

from flask import Blueprint, jsonify, request
from marshmallow import ValidationError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from donetracker import store
from donetracker.errors import error_response
from donetracker.models import db
from donetracker.schemas import TaskCreateSchema, TaskUpdateSchema, task_schema, tasks_schema

logger = logging.getLogger(__name__)

api = Blueprint('api', __name__, url_prefix='/api')


def _request_data():
    # JSON bodies first, urlencoded forms as a fallback
    data = request.get_json(silent=True)
    if data is None:
        data = request.form.to_dict()
    return data if isinstance(data, dict) else {}


@api.route('/tasks', methods=['GET'])
def list_tasks():
    try:
        tasks = store.list_tasks()
    except SQLAlchemyError:
        logger.exception('Error fetching tasks')
        return error_response('Error fetching tasks', 500)
    return jsonify(tasks_schema.dump(tasks))


@api.route('/tasks', methods=['POST'])
def create_task():
    try:
        data = TaskCreateSchema().load(_request_data())
    except ValidationError as err:
        if 'text' in err.messages:
            return error_response('Task text is required', 400)
        return error_response('Invalid task data', 400, details=err.messages)

    try:
        task = store.create_task(**data)
    except SQLAlchemyError:
        logger.exception('Error creating task')
        return error_response('Error creating task', 500)

    return jsonify(task_schema.dump(task)), 201


@api.route('/tasks/<int:task_id>', methods=['PATCH'])
def update_task(task_id):
    try:
        data = TaskUpdateSchema().load(_request_data())
    except ValidationError as err:
        return error_response('Invalid task data', 400, details=err.messages)

    try:
        task = store.update_task(task_id, **data)
    except store.TaskNotFound:
        return error_response('Task not found', 404)
    except SQLAlchemyError:
        logger.exception(f'Error updating task {task_id}')
        return error_response('Error updating task', 500)

    return jsonify(task_schema.dump(task))


@api.route('/tasks/<int:task_id>', methods=['DELETE'])
def delete_task(task_id):
    try:
        store.delete_task(task_id)
    except store.TaskNotFound:
        return error_response('Task not found', 404)
    except SQLAlchemyError:
        logger.exception(f'Error deleting task {task_id}')
        return error_response('Error deleting task', 500)

    return '', 204


@api.route('/health', methods=['GET'])
def health():
    try:
        db.session.execute(text('SELECT 1'))
    except SQLAlchemyError:
        logger.exception('Database health check failed')
        return jsonify({'status': 'unhealthy', 'database': 'unhealthy'}), 503
    return jsonify({'status': 'healthy', 'database': 'healthy', 'message': 'Server is running'})
