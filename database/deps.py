"""FastAPI dependencies that hand out read/write DB sessions.

Routes that only read profiles or weight history use `get_db_read`; anything
that onboards, updates or logs uses `get_db_write`.
"""

from .database import get_read_session, get_write_session


def get_db_write():
    """Yield a write-capable DB session for FastAPI dependency injection."""
    yield from get_write_session()


def get_db_read():
    """Yield a read-only DB session for FastAPI dependency injection."""
    yield from get_read_session()
