"""Shared pytest fixtures for lotledger tests."""

import itertools
import tempfile
import os
from datetime import datetime
from decimal import Decimal
import pytest

from lotledger.database.factories import create_sqlite_database
from lotledger.domain.client import ClientService
from lotledger.domain.commission import CommissionService
from lotledger.domain.entities import Lot
from lotledger.domain.entity import EntityService

FIXED_NOW = datetime(2024, 3, 10, 12, 0, 0)


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


@pytest.fixture
def id_factory():
    """Deterministic, collision-free id source."""
    counter = itertools.count(1)
    return lambda: f"id{next(counter)}"


@pytest.fixture
def commission_service(temp_db, id_factory):
    """Create a CommissionService with a temporary database."""
    return CommissionService(temp_db, id_factory=id_factory)


@pytest.fixture
def client_service(temp_db, id_factory):
    """Create a ClientService with a temporary database and a fixed clock."""
    return ClientService(temp_db, clock=lambda: FIXED_NOW, id_factory=id_factory)


@pytest.fixture
def entity_service(temp_db, commission_service, id_factory):
    """Create an EntityService wired to the commission service."""
    return EntityService(temp_db, commission_service=commission_service, id_factory=id_factory)


@pytest.fixture
def make_lot():
    """Build a domain Lot with a consistent 30/70 split."""
    counter = itertools.count(1)

    def _make(total, value30=None, archived=False, paid=False, lot_number=None):
        n = next(counter)
        total = Decimal(str(total))
        value30 = Decimal(str(value30)) if value30 is not None else total * Decimal("0.3")
        return Lot(
            id=f"lot{n}",
            lot_number=lot_number or str(n),
            name=f"Lot {n}",
            quantity="1",
            total_value=total,
            value30=value30,
            value70=total - value30,
            is_archived=archived,
            is_70_paid=paid,
        )

    return _make


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def reopen(temp_db):
    """Open a new connection to the test database, to see what another session committed."""
    opened = []

    def _reopen():
        db = create_sqlite_database(database_path=temp_db.database_path)
        opened.append(db)
        return db

    yield _reopen

    for db in opened:
        db.disconnect()
