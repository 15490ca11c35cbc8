"""
Timeouts: a navigation timeout fails the scan cleanly, and a scan process
that hangs past MAX_SCAN_TIME is killed and reported as failed.
"""

from queue import Empty

import pytest

import scanner
from browser import NavigationError
from conftest import FakeSessionFactory
from models import ScanRequest
from scanner import Scanner, run_isolated


@pytest.mark.asyncio
async def test_navigation_timeout_gives_failed_result():
    request = ScanRequest.create("https://slow.example", timeout=5)
    pages = {request.url: NavigationError("Timed out after 5s loading https://slow.example")}
    result = await Scanner(session_factory=FakeSessionFactory(pages), post_load_delay=0).scan(request)

    assert result.success is False
    assert result.score == 0
    assert "Timed out" in result.error
    assert result.cookies == ()
    assert result.scripts == ()
    assert result.findings == ()
    assert result.breakdown is None


class HangingProcess:
    """A scan process that never finishes on its own."""

    instances = []

    def __init__(self, target=None, args=()):
        self.target = target
        self.args = args
        self.started = False
        self.killed = False
        self.join_timeouts = []
        HangingProcess.instances.append(self)

    def start(self):
        self.started = True

    def join(self, timeout=None):
        self.join_timeouts.append(timeout)

    def is_alive(self):
        return not self.killed

    def kill(self):
        self.killed = True


class EmptyQueue:
    def __init__(self):
        self.get_timeouts = []

    def get(self, timeout=None):
        self.get_timeouts.append(timeout)
        raise Empty


class FinishedProcess(HangingProcess):
    def is_alive(self):
        return False


class ReadyQueue:
    def __init__(self, item):
        self.item = item

    def get(self, timeout=None):
        return self.item


@pytest.fixture(autouse=True)
def reset_processes():
    HangingProcess.instances = []


def test_hung_scan_process_is_killed(monkeypatch):
    queue = EmptyQueue()
    monkeypatch.setattr(scanner.multiprocessing, "Process", HangingProcess)
    monkeypatch.setattr(scanner.multiprocessing, "Queue", lambda: queue)

    payload = run_isolated(ScanRequest.create("https://hangs.example"), max_scan_time=7)

    process = HangingProcess.instances[0]
    assert process.started
    assert process.killed
    assert process.target is scanner._scan_in_process
    assert queue.get_timeouts == [7]
    assert payload["success"] is False
    assert payload["score"] == 0
    assert payload["error"] == "Scan timed out after 7s"
    assert payload["duration"] == 7.0
    assert payload["compliance_level"] is None


def test_finished_scan_process_is_not_killed(monkeypatch):
    monkeypatch.setattr(scanner.multiprocessing, "Process", FinishedProcess)
    monkeypatch.setattr(scanner.multiprocessing, "Queue", lambda: ReadyQueue({"success": True, "score": 88}))

    payload = run_isolated(ScanRequest.create("https://fast.example"), max_scan_time=7)

    assert payload == {"success": True, "score": 88}
    assert not HangingProcess.instances[0].killed
