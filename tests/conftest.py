import pytest
from fastapi.testclient import TestClient

from canary.config import Settings
from canary.ledger import PingLedger
from canary.main import create_app

TOKEN = "secret123"


@pytest.fixture
def settings() -> Settings:
    return Settings(OPERATOR_TOKEN=TOKEN, MAX_REASON_BYTES=64, _env_file=None)


@pytest.fixture
def ledger(settings: Settings) -> PingLedger:
    return PingLedger()


@pytest.fixture
def client(settings: Settings, ledger: PingLedger) -> TestClient:
    return TestClient(create_app(settings, ledger))
