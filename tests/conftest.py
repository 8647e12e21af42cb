"""Shared pytest fixtures for bonusledger tests."""

import logging
import tempfile
import os
from datetime import datetime, timedelta, UTC
import pytest

from bonusledger.database.factories import create_sqlite_database
from bonusledger.domain.client import ClientService
from bonusledger.domain.purchase import PurchaseService
from bonusledger.domain.refund import RefundService
from bonusledger.domain.sales import SalesService
from bonusledger.domain.vin import VinService


class FakeClock:
    """Controllable clock. Each reading advances time by ``step``."""

    def __init__(self, start: datetime, step: timedelta = timedelta(seconds=1)):
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + self.step
        return current

    def set(self, moment: datetime) -> None:
        self.now = moment

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by CLI invocations so they don't outlive the test."""
    yield
    logger = logging.getLogger("bonusledger")
    for handler in list(logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def clock():
    """Fake clock starting at 2024-05-10 12:00 UTC."""
    return FakeClock(datetime(2024, 5, 10, 12, 0, tzinfo=UTC))


@pytest.fixture
def client_service(temp_db, clock):
    """Create a ClientService with a temporary database."""
    return ClientService(temp_db, clock=clock)


@pytest.fixture
def purchase_service(temp_db, clock):
    """Create a PurchaseService with a temporary database."""
    return PurchaseService(temp_db, clock=clock)


@pytest.fixture
def refund_service(temp_db, clock):
    """Create a RefundService with a temporary database."""
    return RefundService(temp_db, clock=clock)


@pytest.fixture
def sales_service(temp_db):
    """Create a SalesService with a temporary database."""
    return SalesService(temp_db)


@pytest.fixture
def vin_service(temp_db):
    """Create a VinService with a temporary database."""
    return VinService(temp_db)


@pytest.fixture
def sample_client(client_service):
    """Create a sample client for testing."""
    return client_service.create_client(name="Ivan Petrov", phone="89161234567")


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
