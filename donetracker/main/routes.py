import logging
from functools import wraps

from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for

from donetracker.board import DIFFICULTY_OPTIONS, TIME_OPTIONS
from donetracker.sources import TaskSourceError

logger = logging.getLogger(__name__)

main = Blueprint('main', __name__)


def get_board():
    return current_app.extensions['task_board']


def board_action(view):
    """Run a board mutation, then send the browser back to the list."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            view(get_board(), *args, **kwargs)
        except TaskSourceError as exc:
            logger.error(f'{request.method} {request.path} failed: {exc}')
            flash(f'Could not save your change: {exc}')
        except ValueError as exc:
            flash(str(exc))
        return redirect(url_for('main.index'))

    return wrapper


@main.route('/')
def index():
    board = get_board()
    try:
        board.load()
    except TaskSourceError as exc:
        logger.error(f'Error fetching tasks: {exc}')
        flash('Could not load tasks.')
    return render_template(
        'main/index.html',
        tasks=board.tasks,
        open_menu_id=board.open_menu_id,
        time_options=TIME_OPTIONS,
        difficulty_options=DIFFICULTY_OPTIONS,
    )


@main.route('/tasks', methods=['POST'])
@board_action
def add_task(board):
    board.add_task(request.form.get('text', ''))


@main.route('/tasks/<int:task_id>/menu', methods=['POST'])
@board_action
def toggle_menu(board, task_id):
    board.toggle_menu(task_id)


@main.route('/tasks/<int:task_id>/delete', methods=['POST'])
@board_action
def delete_task(board, task_id):
    board.delete_task(task_id)


@main.route('/tasks/<int:task_id>/time', methods=['POST'])
@board_action
def update_time_spent(board, task_id):
    board.update_time_spent(task_id, request.form.get('time_spent', 0))


@main.route('/tasks/<int:task_id>/difficulty', methods=['POST'])
@board_action
def update_difficulty(board, task_id):
    board.update_difficulty(task_id, request.form.get('difficulty', ''))


@main.route('/tasks/<int:task_id>/completed', methods=['POST'])
@board_action
def update_date_completed(board, task_id):
    board.update_date_completed(task_id, request.form.get('date_completed', ''))
