"""Pytest configuration and fixtures for mdtask tests."""

from datetime import datetime, timedelta
from pathlib import Path

import pytest

from mdtask.config import Config
from mdtask.ids import TaskIdGenerator
from mdtask.repository import TaskRepository
from mdtask.server import set_service
from mdtask.service import TaskService


class FakeClock:
    """Manually advanced clock. Passing ``advance`` as ``sleep`` makes ID waits instant."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float = 1.0) -> None:
        self.now += timedelta(seconds=seconds)


def write_file(path: Path, text: str) -> Path:
    """Write ``text`` to ``path``, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def clock():
    """Clock fixed at 2025-01-15 10:30:00 (a Wednesday)."""
    return FakeClock(datetime(2025, 1, 15, 10, 30, 0))


@pytest.fixture
def id_generator(clock):
    return TaskIdGenerator(clock=clock, sleep=clock.advance)


@pytest.fixture
def task_dir(tmp_path):
    path = tmp_path / "tasks"
    path.mkdir()
    return path


@pytest.fixture
def repo(task_dir, id_generator, clock):
    return TaskRepository([task_dir], id_generator=id_generator, clock=clock)


@pytest.fixture
def config():
    return Config()


@pytest.fixture
def service(repo, config, clock):
    return TaskService(repo, config, clock=clock)


@pytest.fixture
def tool_service(service):
    """Install ``service`` as the one the MCP tools use."""
    set_service(service)
    yield service
    set_service(None)
