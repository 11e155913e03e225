from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

DIFFICULTIES = ('easy', 'medium', 'hard', 'very-hard')
DEFAULT_DIFFICULTY = 'medium'


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_utc(value):
    """Normalize a datetime to naive UTC, the form stored in the table."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class Task(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    text = db.Column(db.Text, nullable=False)
    time_spent = db.Column(db.Integer, nullable=False, default=0)
    difficulty = db.Column(db.String(20), nullable=False, default=DEFAULT_DIFFICULTY)
    date_completed = db.Column(db.DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f'<Task {self.id} {self.difficulty}>'
