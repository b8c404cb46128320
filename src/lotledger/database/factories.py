"""Database factory functions for creating database instances."""

from pathlib import Path
from typing import Optional

from lotledger.config.logging import get_logger
from lotledger.config.settings import get_settings
from lotledger.database.sqlalchemy_db import SQLAlchemyDatabase

logger = get_logger(__name__)

DEFAULT_DB_DIR = ".lotledger"
DEFAULT_DB_FILE = "lotledger.db"


def resolve_database_path(database_path: Optional[str] = None) -> Path:
    """Pick the ledger file: the argument, then LOTLEDGER_DB_PATH, then ~/.lotledger/lotledger.db.

    ``~`` is expanded and missing parent directories are created.
    """
    chosen = database_path or get_settings().db_path
    if chosen is None:
        path = Path.home() / DEFAULT_DB_DIR / DEFAULT_DB_FILE
    else:
        path = Path(chosen).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Open the SQLite ledger, creating the file and its tables if needed.

    Args:
        database_path: Path to the SQLite file; see ``resolve_database_path``

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    path = resolve_database_path(database_path)
    logger.debug("database_opened", path=str(path))
    return SQLAlchemyDatabase(f"sqlite:///{path}")
