import pytest

from pharmacy_pos.core.notifications import MemoryNotifier
from pharmacy_pos.services import build_context
from tests.fakes import FakeStore


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def notifier():
    return MemoryNotifier()


@pytest.fixture
def context(store, notifier):
    return build_context(store, notifier)


@pytest.fixture
def ledger(context):
    return context.inventory


@pytest.fixture
def billing(context):
    return context.billing
