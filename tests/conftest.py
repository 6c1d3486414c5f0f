import pytest

from nonceguard.application.nonce_engine import NonceEngine
from nonceguard.domain.config import RANDOM_SALT, NonceConfig
from nonceguard.infrastructure.memory.session_store import InMemorySessionRegistry
from tests.fakes import TEST_SECRET, FakeClock


@pytest.fixture()
def config():
    return NonceConfig().set_config(RANDOM_SALT, TEST_SECRET)


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def store_clock():
    return FakeClock(now=100.0)


@pytest.fixture()
def registry(store_clock):
    return InMemorySessionRegistry(clock=store_clock)


@pytest.fixture()
def store(registry):
    return registry.session("session-1")


@pytest.fixture()
def engine(config, store, clock):
    return NonceEngine(config, store, clock=clock)
