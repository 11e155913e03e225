"""Tests for the local and API task sources."""

import json

import httpx
import pytest

from donetracker.config import TestConfig
from donetracker.sources import (
    ApiTaskSource,
    LocalTaskSource,
    TaskSourceError,
    build_task_source,
)


class TestLocalTaskSource:
    def test_load_missing_file(self, tmp_path):
        assert LocalTaskSource(tmp_path / 'tasks.json').load() == []

    def test_create_persists_whole_array_under_key(self, tmp_path):
        path = tmp_path / 'tasks.json'
        source = LocalTaskSource(path)

        first = source.create({'text': 'one'})
        second = source.create({'text': 'two', 'timeSpent': 30, 'difficulty': 'hard'})

        stored = json.loads(path.read_text())
        assert list(stored) == ['tasks']
        assert [task['id'] for task in stored['tasks']] == [second['id'], first['id']]
        assert first['timeSpent'] == 0
        assert first['difficulty'] == 'medium'
        assert len(first['dateCompleted']) == 16
        assert second['timeSpent'] == 30

    def test_ids_are_unique_and_increasing(self, tmp_path):
        source = LocalTaskSource(tmp_path / 'tasks.json')
        ids = [source.create({'text': str(n)})['id'] for n in range(5)]
        assert ids == sorted(set(ids))

    def test_other_keys_are_preserved(self, tmp_path):
        path = tmp_path / 'tasks.json'
        path.write_text(json.dumps({'theme': 'dark'}))

        LocalTaskSource(path).create({'text': 'keep theme'})

        assert json.loads(path.read_text())['theme'] == 'dark'

    def test_reload_from_disk(self, tmp_path):
        path = tmp_path / 'tasks.json'
        created = LocalTaskSource(path).create({'text': 'survives restart'})

        assert LocalTaskSource(path).load() == [created]

    def test_update_and_delete(self, tmp_path):
        path = tmp_path / 'tasks.json'
        source = LocalTaskSource(path)
        task = source.create({'text': 'edit me'})

        updated = source.update(task['id'], {'difficulty': 'very-hard', 'id': 1})
        assert updated['difficulty'] == 'very-hard'
        assert updated['id'] == task['id']

        source.delete(task['id'])
        assert LocalTaskSource(path).load() == []

    def test_missing_task(self, tmp_path):
        source = LocalTaskSource(tmp_path / 'tasks.json')
        with pytest.raises(TaskSourceError):
            source.update(1, {'timeSpent': 15})
        with pytest.raises(TaskSourceError):
            source.delete(1)

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / 'tasks.json'
        path.write_text('{not json')
        with pytest.raises(TaskSourceError):
            LocalTaskSource(path).load()


class TestApiTaskSource:
    def test_crud_against_app(self, db, api_client):
        source = ApiTaskSource(api_client)

        created = source.create({'text': 'via http', 'timeSpent': 0, 'difficulty': 'medium'})
        assert created['difficulty'] == 'medium'
        assert source.load()[0]['id'] == created['id']

        updated = source.update(created['id'], {'timeSpent': 60})
        assert updated['timeSpent'] == 60

        source.delete(created['id'])
        assert source.load() == []

    def test_error_message_from_api(self, db, api_client):
        source = ApiTaskSource(api_client)
        with pytest.raises(TaskSourceError, match='Task not found'):
            source.delete(12345)

    def test_close_releases_client(self):
        client = httpx.Client(base_url='http://tracker')
        ApiTaskSource(client).close()
        assert client.is_closed

    def test_transport_failure(self):
        def refuse(request):
            raise httpx.ConnectError('connection refused', request=request)

        client = httpx.Client(transport=httpx.MockTransport(refuse), base_url='http://tracker')
        with pytest.raises(TaskSourceError, match='GET /api/tasks failed'):
            ApiTaskSource(client).load()

    def test_non_json_error(self):
        client = httpx.Client(
            transport=httpx.MockTransport(lambda request: httpx.Response(502, text='Bad Gateway')),
            base_url='http://tracker',
        )
        with pytest.raises(TaskSourceError, match='HTTP 502'):
            ApiTaskSource(client).load()


class TestBuildTaskSource:
    def test_local(self, tmp_path):
        config = {'TASK_SOURCE': 'local', 'TASKS_FILE': None}
        source = build_task_source(config, tmp_path)
        assert isinstance(source, LocalTaskSource)
        assert source.path == tmp_path / 'tasks.json'

    def test_api(self, tmp_path):
        source = build_task_source({'TASK_SOURCE': 'api', 'PORT': 4100}, tmp_path)
        assert isinstance(source, ApiTaskSource)
        assert source.client.base_url.host == '127.0.0.1'
        assert source.client.base_url.port == 4100

    def test_unknown(self, tmp_path):
        with pytest.raises(ValueError):
            build_task_source({'TASK_SOURCE': 'carrier-pigeon'}, tmp_path)

    def test_test_config_uses_local_storage(self):
        assert TestConfig.TASK_SOURCE == 'local'
