"""Pytest fixtures and configuration for tasksync tests."""

import pytest

from tasksync.api.client import ApiClient
from tasksync.engine.sync import SyncEngine
from tasksync.engine.timers import ManualScheduler
from tests.fakes import BASE_URL, FakeBackend


@pytest.fixture
def backend():
    """In-memory task server standing in for requests.Session."""
    return FakeBackend()


@pytest.fixture
def api_client(backend):
    """ApiClient wired to the fake backend."""
    return ApiClient(BASE_URL, session=backend)


@pytest.fixture
def scheduler():
    """Virtual-time scheduler; advance() fires notification expiry."""
    return ManualScheduler()


@pytest.fixture
def confirm_answers():
    """Answers returned by the delete confirmation, in order (default: yes)."""
    return []


@pytest.fixture
def engine(api_client, scheduler, confirm_answers):
    """SyncEngine with an anonymous session and no startup probe yet."""
    prompts = []

    def confirm(prompt):
        prompts.append(prompt)
        return confirm_answers.pop(0) if confirm_answers else True

    sync = SyncEngine(api_client, scheduler=scheduler, confirm=confirm)
    sync.confirm_prompts = prompts
    yield sync
    sync.close()


@pytest.fixture
def seeded_backend(backend):
    """Backend with three tasks (ids 3, 5, 7); task 3 has two subtasks."""
    backend.add_task(3, "Write report", priority="high", due_date="2024-05-01", eta=2)
    backend.add_task(5, "Buy milk", priority="low")
    backend.add_task(7, "Call plumber", priority="critical", completed=True)
    backend.add_subtask(3, 31, "Outline")
    backend.add_subtask(3, 32, "Draft", completed=True)
    return backend


@pytest.fixture
def logged_in_engine(engine, seeded_backend, scheduler):
    """Engine logged in as alice with the seeded tasks loaded.

    The welcome flash is expired and the call log cleared so each test
    starts from a quiet state.
    """
    assert engine.login("alice", "secret")
    scheduler.advance(10)
    seeded_backend.calls.clear()
    return engine
