"""Task persistence on top of the Flask-SQLAlchemy session."""

import logging

from sqlalchemy.exc import SQLAlchemyError

from donetracker.models import DEFAULT_DIFFICULTY, Task, as_utc, db, utcnow

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ('text', 'time_spent', 'difficulty', 'date_completed')


class TaskNotFound(LookupError):
    def __init__(self, task_id):
        super().__init__(f'Task {task_id} not found')
        self.task_id = task_id


def list_tasks():
    return (
        db.session.query(Task)
        .order_by(Task.created_at.desc(), Task.id.desc())
        .all()
    )


def get_task(task_id):
    task = db.session.get(Task, task_id)
    if task is None:
        raise TaskNotFound(task_id)
    return task


def create_task(text, time_spent=0, difficulty=DEFAULT_DIFFICULTY, date_completed=None):
    task = Task(
        text=text,
        time_spent=time_spent or 0,
        difficulty=difficulty or DEFAULT_DIFFICULTY,
        date_completed=as_utc(date_completed) or utcnow(),
    )
    db.session.add(task)
    _commit()
    logger.info(f'Task created: {task.id}')
    return task


def update_task(task_id, **fields):
    """Apply a partial update.

    Only the columns in UPDATABLE_FIELDS are written; ``id`` and
    ``created_at`` never change after creation.
    """
    task = get_task(task_id)
    for name in UPDATABLE_FIELDS:
        if name not in fields:
            continue
        value = fields[name]
        if name == 'date_completed':
            value = as_utc(value)
        setattr(task, name, value)
    _commit()
    logger.info(f'Task updated: {task.id} ({", ".join(sorted(fields)) or "no fields"})')
    return task


def delete_task(task_id):
    task = get_task(task_id)
    db.session.delete(task)
    _commit()
    logger.info(f'Task deleted: {task_id}')


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
