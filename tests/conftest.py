import pytest

from config import AppConfig
from engine import ManualClock, Stepper
from main import RUNS, create_app


@pytest.fixture
def app():
    app = create_app(AppConfig(secret_key="test-secret", log_level="WARNING"))
    app.config["TESTING"] = True
    yield app
    RUNS.clear()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def drive():
    """Run a machine to completion headlessly; returns (snapshots, result)."""
    def _drive(machine):
        snapshots = []
        result = Stepper(clock=ManualClock()).run(machine, delay_ms=0, on_snapshot=snapshots.append)
        return snapshots, result
    return _drive
