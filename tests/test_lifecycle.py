import asyncio
import os
import signal
import socket
import subprocess
import sys
import threading
import time
from pathlib import Path

import httpx
import pytest
import uvicorn
from fastapi.testclient import TestClient

from supportops.main import SupportOpsServer, create_app
from supportops.shared.infrastructure.lifecycle import (
    LifecycleState,
    ProcessLifecycle,
    install_exception_hooks,
    install_loop_exception_handler,
)
from tests.conftest import make_settings

SRC_DIR = Path(__file__).resolve().parents[1] / "src"


class ExitRecorder:
    def __init__(self):
        self.codes = []
        self.called = threading.Event()

    def __call__(self, code):
        self.codes.append(code)
        self.called.set()


def test_starts_running():
    lifecycle = ProcessLifecycle(grace_seconds=10, exit_func=ExitRecorder())
    assert lifecycle.state == LifecycleState.RUNNING
    assert not lifecycle.is_shutting_down


def test_shutdown_is_entered_once():
    recorder = ExitRecorder()
    lifecycle = ProcessLifecycle(grace_seconds=10, exit_func=recorder)

    assert lifecycle.begin_shutdown("SIGTERM") is True
    assert lifecycle.begin_shutdown("SIGINT") is False
    assert lifecycle.state == LifecycleState.SHUTTING_DOWN

    lifecycle.complete()
    assert recorder.codes == []


def test_watchdog_forces_exit_when_close_stalls():
    recorder = ExitRecorder()
    lifecycle = ProcessLifecycle(grace_seconds=0.05, exit_func=recorder)

    lifecycle.begin_shutdown("SIGTERM")

    assert recorder.called.wait(timeout=2)
    assert recorder.codes == [1]


def test_complete_disarms_watchdog():
    recorder = ExitRecorder()
    lifecycle = ProcessLifecycle(grace_seconds=0.1, exit_func=recorder)

    lifecycle.begin_shutdown("SIGTERM")
    lifecycle.complete()

    assert not recorder.called.wait(timeout=0.3)


def test_server_signal_enters_shutting_down():
    recorder = ExitRecorder()
    lifecycle = ProcessLifecycle(grace_seconds=10, exit_func=recorder)
    server = SupportOpsServer(uvicorn.Config(create_app(make_settings())), lifecycle)

    server.handle_exit(signal.SIGTERM, None)

    assert lifecycle.is_shutting_down
    assert server.should_exit
    lifecycle.complete()


def test_handled_signal_is_not_reraised_after_serving():
    lifecycle = ProcessLifecycle(grace_seconds=10, exit_func=ExitRecorder())
    server = SupportOpsServer(uvicorn.Config(create_app(make_settings())), lifecycle)

    server.handle_exit(signal.SIGINT, None)

    assert server._captured_signals == []
    lifecycle.complete()


def test_exception_hooks_log_and_do_not_exit(monkeypatch):
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    monkeypatch.setattr(threading, "excepthook", threading.excepthook)

    loop = asyncio.new_event_loop()
    try:
        install_exception_hooks()
        install_loop_exception_handler(loop)
        assert loop.get_exception_handler() is not None

        loop.call_exception_handler({"message": "Task exception was never retrieved",
                                     "exception": RuntimeError("lost")})
        sys.excepthook(ValueError, ValueError("uncaught"), None)

        worker = threading.Thread(target=lambda: 1 / 0)
        worker.start()
        worker.join()
    finally:
        loop.close()


def test_app_startup_leaves_process_hooks_alone():
    excepthook, thread_excepthook = sys.excepthook, threading.excepthook

    with TestClient(create_app(make_settings())) as client:
        assert client.get("/health").status_code == 200

    assert sys.excepthook is excepthook
    assert threading.excepthook is thread_excepthook


def _free_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def _wait_until_healthy(port, proc, timeout=20.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if proc.poll() is not None:
            pytest.fail(f"server exited early:\n{proc.communicate()[0]}")
        try:
            if httpx.get(f"http://127.0.0.1:{port}/health", timeout=0.5).status_code == 200:
                return
        except httpx.TransportError:
            pass
        time.sleep(0.1)
    pytest.fail("server did not become healthy")


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals")
@pytest.mark.parametrize("sig", [signal.SIGTERM, signal.SIGINT])
def test_server_process_exits_cleanly_on_signal(tmp_path, sig):
    port = _free_port()
    env = dict(
        os.environ,
        PORT=str(port),
        HOST="127.0.0.1",
        MOCK_LLM="true",
        LOG_LEVEL="INFO",
        PYTHONPATH=os.pathsep.join(filter(None, [str(SRC_DIR), os.environ.get("PYTHONPATH")])),
    )
    proc = subprocess.Popen(
        [sys.executable, "-m", "supportops.main"],
        cwd=tmp_path,
        env=env,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
    )
    try:
        _wait_until_healthy(port, proc)
        proc.send_signal(sig)
        output, _ = proc.communicate(timeout=15)
    finally:
        if proc.poll() is None:
            proc.kill()
            proc.communicate()

    assert proc.returncode == 0, output
    assert "HTTP server closed" in output
    assert "Forcing shutdown" not in output
