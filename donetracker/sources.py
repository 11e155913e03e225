"""Task sources backing the task board.

A source is the board's only persistence boundary. Two implementations are
interchangeable:

- LocalTaskSource keeps every task in a JSON file under a single key,
  the way a browser keeps them in local storage. No server is involved.
- ApiTaskSource talks to the REST API over HTTP.

Which one the board uses is decided once, in build_task_source().
"""

import json
import logging
import time
from datetime import datetime, timezone
from pathlib import Path

import httpx

logger = logging.getLogger(__name__)

LOCAL_FIELDS = ('text', 'timeSpent', 'difficulty', 'dateCompleted')


class TaskSourceError(Exception):
    """Raised when a source cannot complete an operation."""


class TaskSource:
    def load(self):
        """Return every task, newest first."""
        raise NotImplementedError

    def create(self, fields):
        raise NotImplementedError

    def update(self, task_id, fields):
        raise NotImplementedError

    def delete(self, task_id):
        raise NotImplementedError

    def close(self):
        pass


class LocalTaskSource(TaskSource):
    """Tasks stored as one JSON array under ``key`` in a local file.

    The whole array is rewritten after every mutation. Writers in other
    processes are not coordinated; the last write wins.
    """

    def __init__(self, path, key='tasks'):
        self.path = Path(path)
        self.key = key
        self._tasks = None
        self._last_id = 0

    def load(self):
        self._tasks = self._read().get(self.key) or []
        self._last_id = max((task['id'] for task in self._tasks), default=0)
        return [dict(task) for task in self._tasks]

    def create(self, fields):
        tasks = self._loaded()
        now = datetime.now(timezone.utc)
        task = {
            'id': self._next_id(),
            'text': fields['text'],
            'timeSpent': fields.get('timeSpent') or 0,
            'difficulty': fields.get('difficulty') or 'medium',
            'dateCompleted': fields.get('dateCompleted') or now.strftime('%Y-%m-%dT%H:%M'),
            'createdAt': now.isoformat(),
        }
        tasks.insert(0, task)
        self._write()
        return dict(task)

    def update(self, task_id, fields):
        task = self._find(task_id)
        task.update({key: value for key, value in fields.items() if key in LOCAL_FIELDS})
        self._write()
        return dict(task)

    def delete(self, task_id):
        task = self._find(task_id)
        self._tasks.remove(task)
        self._write()

    def _loaded(self):
        if self._tasks is None:
            self.load()
        return self._tasks

    def _find(self, task_id):
        for task in self._loaded():
            if task['id'] == task_id:
                return task
        raise TaskSourceError(f'Task {task_id} not found')

    def _next_id(self):
        # millisecond clock, bumped so ids stay unique within the same millisecond
        self._last_id = max(int(time.time() * 1000), self._last_id + 1)
        return self._last_id

    def _read(self):
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding='utf-8') or '{}')
        except (OSError, ValueError) as exc:
            raise TaskSourceError(f'Cannot read {self.path}: {exc}') from exc
        return data if isinstance(data, dict) else {}

    def _write(self):
        data = self._read()
        data[self.key] = self._tasks
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2), encoding='utf-8')
        except OSError as exc:
            raise TaskSourceError(f'Cannot write {self.path}: {exc}') from exc


class ApiTaskSource(TaskSource):
    """Tasks served by the REST API. Failures are not retried."""

    def __init__(self, client: httpx.Client):
        self.client = client

    def load(self):
        return self._request('GET', '/api/tasks').json()

    def create(self, fields):
        return self._request('POST', '/api/tasks', json=fields).json()

    def update(self, task_id, fields):
        return self._request('PATCH', f'/api/tasks/{task_id}', json=fields).json()

    def delete(self, task_id):
        self._request('DELETE', f'/api/tasks/{task_id}')

    def close(self):
        self.client.close()

    def _request(self, method, url, **kwargs):
        try:
            response = self.client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise TaskSourceError(_error_message(exc.response)) from exc
        except httpx.HTTPError as exc:
            raise TaskSourceError(f'{method} {url} failed: {exc}') from exc
        return response


def _error_message(response):
    try:
        message = response.json().get('error')
    except ValueError:
        message = None
    return message or f'HTTP {response.status_code}'


def build_task_source(config, instance_path):
    """Pick the board's source from the TASK_SOURCE setting."""
    kind = config.get('TASK_SOURCE', 'api')
    if kind == 'local':
        path = config.get('TASKS_FILE') or Path(instance_path) / 'tasks.json'
        logger.info(f'Task board using local storage at {path}')
        return LocalTaskSource(path)
    if kind == 'api':
        base_url = config.get('TASK_API_URL') or f"http://127.0.0.1:{config.get('PORT', 4000)}"
        timeout = config.get('TASK_API_TIMEOUT')
        client = httpx.Client(
            base_url=base_url,
            timeout=timeout if timeout is not None else httpx.Timeout(5.0),
        )
        logger.info(f'Task board using API at {base_url}')
        return ApiTaskSource(client)
    raise ValueError(f'Unknown TASK_SOURCE: {kind!r}')
