"""Shared fixtures for the job tracker tests."""

import pytest

from jobtracker.config import ModelConfig
from jobtracker.models import (
    Company,
    Folder,
    FolderColor,
    JobRecord,
    Position,
)
from jobtracker.notifications import NotificationQueue
from jobtracker.store import AppStore

API_URL = "https://model.test/api/v3/chat/completions"


class FakeTimer:
    """Stands in for threading.Timer; fires only when the test says so."""

    instances = []

    def __init__(self, interval, function, args=()):
        self.interval = interval
        self.function = function
        self.args = args
        self.daemon = False
        self.started = False
        self.cancelled = False
        FakeTimer.instances.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if not self.cancelled:
            self.function(*self.args)


@pytest.fixture(autouse=True)
def _no_model_credential(monkeypatch):
    monkeypatch.delenv("ARK_API_KEY", raising=False)
    monkeypatch.delenv("DOUBAO_API_KEY", raising=False)
    FakeTimer.instances = []


@pytest.fixture
def model_config():
    return ModelConfig(api_url=API_URL, api_key="test-key")


@pytest.fixture
def offline_config():
    return ModelConfig(api_url=API_URL, api_key="")


@pytest.fixture
def queue():
    return NotificationQueue(timer_factory=FakeTimer)


def make_job(job_id, folder_id="folder-a", **changes):
    job = JobRecord(
        id=job_id,
        folder_id=folder_id,
        company=Company(name=f"Company {job_id}"),
        position=Position(title=f"Title {job_id}"),
    )
    for key, value in changes.items():
        setattr(job, key, value)
    return job


@pytest.fixture
def store(queue):
    folders = [
        Folder(id="folder-a", name="A", color=FolderColor.BLUE),
        Folder(id="folder-b", name="B", color=FolderColor.MINT),
    ]
    jobs = [
        make_job("job-1", "folder-a"),
        make_job("job-2", "folder-a"),
        make_job("job-3", "folder-b"),
    ]
    return AppStore(folders, jobs, notifications=queue)
