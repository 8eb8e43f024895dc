from typing import Generator, List

import pytest
from loguru import logger

from automation_exercise.ui_testing.framework.session_manager import DriverManager
from automation_exercise.ui_testing.framework.settings import SessionSettings
from automation_exercise.ui_testing.framework.wait_helper import WaitHelper
from automation_exercise.unit.fakes import FakeBackend, FakeClock, FakeSession


@pytest.fixture
def settings() -> SessionSettings:
    return SessionSettings(base_url="https://shop.example.com", headless=True, explicit_wait=2.0)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def manager(settings: SessionSettings, backend: FakeBackend) -> Generator[DriverManager, None, None]:
    """Initialized manager over the fake backend."""
    manager = DriverManager(settings, backend=backend)
    manager.initialize()
    yield manager
    manager.release()


@pytest.fixture
def session(manager: DriverManager) -> FakeSession:
    return manager.driver


@pytest.fixture
def wait(manager: DriverManager, clock: FakeClock) -> WaitHelper:
    return WaitHelper.from_manager(manager, clock=clock, sleep=clock.sleep)


@pytest.fixture
def log_messages() -> Generator[List[str], None, None]:
    """Collect loguru messages emitted during the test."""
    messages: List[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
