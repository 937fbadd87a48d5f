"""Database package: ORM models, session factories and table creation."""

from .database import (
    WriteSessionLocal,
    ReadSessionLocal,
    init_db,
)
from . import models

__all__ = [
    "WriteSessionLocal",
    "ReadSessionLocal",
    "init_db",
    "models",
]
