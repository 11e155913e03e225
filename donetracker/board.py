"""State of the task list page."""

from collections import namedtuple
from datetime import datetime, timezone

from donetracker.models import DEFAULT_DIFFICULTY

Option = namedtuple('Option', 'value label color')

TIME_OPTIONS = (
    Option(15, '15m', None),
    Option(30, '30m', None),
    Option(45, '45m', None),
    Option(60, '1h', None),
    Option(90, '1.5h', None),
    Option(120, '2h', None),
    Option(180, '3h', None),
    Option(240, '4h', None),
)

DIFFICULTY_OPTIONS = (
    Option('easy', 'Easy', 'text-green-600'),
    Option('medium', 'Medium', 'text-yellow-600'),
    Option('hard', 'Hard', 'text-orange-600'),
    Option('very-hard', 'Very Hard', 'text-red-600'),
)


def current_date_time():
    return datetime.now(timezone.utc).strftime('%Y-%m-%dT%H:%M')


def difficulty_color(difficulty):
    for option in DIFFICULTY_OPTIONS:
        if option.value == difficulty:
            return option.color
    return 'text-gray-600'


def format_time(minutes):
    minutes = int(minutes or 0)
    if minutes < 60:
        return f'{minutes}m'
    hours, remaining = divmod(minutes, 60)
    return f'{hours}h {remaining}m' if remaining else f'{hours}h'


def format_date(value):
    if not value:
        return ''
    if not isinstance(value, datetime):
        try:
            value = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
        except ValueError:
            return value
    return f'{value:%b} {value.day}, {value.year}'


class TaskBoard:
    """Tasks shown on the page plus which row's menu is open.

    Every change goes through ``source`` first; local state is updated only
    after the source call succeeds. Failed calls leave the state untouched
    and the TaskSourceError propagates to the caller.
    """

    def __init__(self, source):
        self.source = source
        self.tasks = []
        self.open_menu_id = None

    def load(self):
        self.tasks = self.source.load()
        return self.tasks

    def add_task(self, text):
        if not text or not text.strip():
            return None
        self.close_menu()
        task = self.source.create({
            'text': text,
            'timeSpent': 0,
            'difficulty': DEFAULT_DIFFICULTY,
            'dateCompleted': current_date_time(),
        })
        self.tasks.insert(0, task)
        return task

    def delete_task(self, task_id):
        self.close_menu()
        self.source.delete(task_id)
        self.tasks = [task for task in self.tasks if task['id'] != task_id]

    def update_time_spent(self, task_id, minutes):
        minutes = int(minutes)
        if minutes != 0 and minutes not in {option.value for option in TIME_OPTIONS}:
            raise ValueError(f'Unsupported time spent: {minutes}')
        return self._update(task_id, {'timeSpent': minutes})

    def update_difficulty(self, task_id, difficulty):
        if difficulty not in {option.value for option in DIFFICULTY_OPTIONS}:
            raise ValueError(f'Unsupported difficulty: {difficulty}')
        return self._update(task_id, {'difficulty': difficulty})

    def update_date_completed(self, task_id, value):
        if not value:
            raise ValueError('Completion date is required')
        try:
            datetime.fromisoformat(value.replace('Z', '+00:00'))
        except ValueError:
            raise ValueError(f'Invalid completion date: {value}') from None
        return self._update(task_id, {'dateCompleted': value})

    def toggle_menu(self, task_id):
        # at most one row has its menu open
        self.open_menu_id = None if self.open_menu_id == task_id else task_id

    def close_menu(self):
        self.open_menu_id = None

    def _update(self, task_id, fields):
        self.close_menu()
        updated = self.source.update(task_id, fields)
        self.tasks = [updated if task['id'] == task_id else task for task in self.tasks]
        return updated
