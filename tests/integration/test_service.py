"""Process-level tests: the service binary, its signals and exit codes."""

import signal
import socket
import time

import pytest
import requests

from tests.utils.ports import find_free_port
from tests.utils.service_process import ServiceProcess

# Drain deadline plus interpreter start-up and scheduling slack
EXIT_WINDOW = 2.0 + 3.0


@pytest.fixture
def service():
    """Start the service on a free port and kill it if a test leaves it running."""
    port = find_free_port()
    process = ServiceProcess(env={"PORT": str(port), "LIVENESS_OUTPUT": "plain"}).start()
    process.port = port
    yield process
    process.kill()


def test_starts_on_custom_port(service):
    assert service.wait_for_output(f"Starting server on :{service.port}", timeout=10), service.output


def test_answers_health_endpoint(service):
    assert service.wait_for_output("Starting server on ", timeout=10), service.output

    resp = requests.get(f"http://127.0.0.1:{service.port}/health", timeout=2)
    assert resp.status_code == 200
    assert resp.headers["Content-Type"] == "application/json"
    assert resp.content == b'{"alive":true}'


@pytest.mark.parametrize("sig", [signal.SIGINT, signal.SIGTERM])
def test_shuts_down_on_signal(service, sig):
    assert service.wait_for_output("Starting server on ", timeout=10), service.output

    began = time.monotonic()
    service.proc.send_signal(sig)
    exit_code = service.wait_exit(EXIT_WINDOW)

    assert exit_code == 0, service.output
    assert time.monotonic() - began < EXIT_WINDOW
    assert service.wait_for_output("Server exited properly", timeout=1), service.output
    assert "Shutting down server..." in service.output


def test_second_interrupt_has_no_effect(service):
    assert service.wait_for_output("Starting server on ", timeout=10), service.output

    service.interrupt()
    service.interrupt()
    exit_code = service.wait_exit(EXIT_WINDOW)

    assert exit_code == 0, service.output
    assert service.output.count("Shutting down server...") == 1
    assert "Traceback" not in service.output


def test_fails_when_port_busy():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as blocker:
        blocker.bind(("", 0))
        blocker.listen()
        port = blocker.getsockname()[1]

        process = ServiceProcess(env={"PORT": str(port)}).start()
        try:
            exit_code = process.wait_exit(10)
        finally:
            process.kill()

    assert exit_code not in (None, 0)
    assert "address already in use" in process.output
    assert "Starting server on" not in process.output
