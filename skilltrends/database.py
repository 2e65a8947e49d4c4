"""
SQLite-backed key-value buckets.

Uses SQLAlchemy with one table shared by all buckets; each row holds one
JSON-encoded value.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, Column, String, Text, DateTime
from sqlalchemy.orm import declarative_base, sessionmaker

from .storage import KeyValueStore

Base = declarative_base()


class KVEntry(Base):
    """One key in one bucket."""

    __tablename__ = "kv_entries"

    bucket = Column(String, primary_key=True)  # local | sync
    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)  # JSON
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)


def init_database(db_path: Path):
    """
    Initialize database and create tables.

    Args:
        db_path: Path to SQLite database file

    Returns:
        SQLAlchemy engine bound to the database
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)
    return engine



class SqliteStore(KeyValueStore):
    """Bucket stored as rows of the kv_entries table."""

    def __init__(self, db_path: Path, bucket: str):
        self.db_path = Path(db_path)
        self.bucket = bucket
        self._engine = init_database(self.db_path)
        self._Session = sessionmaker(bind=self._engine)

    def get(self, key: str, default: Any = None) -> Any:
        session = self._Session()
        try:
            entry = session.get(KVEntry, (self.bucket, key))
            if entry is None:
                return default
            try:
                return json.loads(entry.value)
            except json.JSONDecodeError:
                return default
        finally:
            session.close()

    def set(self, key: str, value: Any) -> None:
        encoded = json.dumps(value, ensure_ascii=False)
        session = self._Session()
        try:
            entry = session.get(KVEntry, (self.bucket, key))
            if entry is None:
                session.add(KVEntry(bucket=self.bucket, key=key, value=encoded))
            else:
                entry.value = encoded
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def remove(self, key: str) -> None:
        session = self._Session()
        try:
            session.query(KVEntry).filter_by(bucket=self.bucket, key=key).delete()
            session.commit()
        finally:
            session.close()
