import pytest

from alerts import AlertEngine
from db import ConfigStore
from services import AlertScanner, SymbolResolver

from fakes import FakeClock, FakeNotifier, FakePriceSource


CATALOG = [
    {"id": "ripple", "symbol": "xrp", "name": "XRP"},
    {"id": "bitcoin", "symbol": "btc", "name": "Bitcoin"},
    {"id": "wrapped-bitcoin-fake", "symbol": "btc", "name": "Fake BTC"},
    {"id": "solana", "symbol": "sol", "name": "Solana"},
]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def price_source():
    return FakePriceSource(
        catalog=CATALOG,
        prices={"ripple": 0.615, "bitcoin": 50000.0, "solana": 100.0}
    )


@pytest.fixture
def store():
    return ConfigStore()


@pytest.fixture
def engine(notifier, clock):
    return AlertEngine(notifier=notifier, cooldown_minutes=30, clock=clock)


@pytest.fixture
def resolver(price_source, clock):
    return SymbolResolver(catalog_source=price_source, clock=clock)


@pytest.fixture
def scanner(store, resolver, price_source, engine):
    return AlertScanner(
        store=store,
        resolver=resolver,
        price_client=price_source,
        engine=engine,
        interval_sec=300,
        startup_delay_sec=30
    )
