from __future__ import annotations

import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Generator, List, Mapping

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    MetaData,
    Table,
    Text,
    Uuid,
    create_engine,
    delete,
    insert,
    select,
    text,
    update,
)
from sqlalchemy.engine import URL, Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from .errors import NotFoundError, StoreError
from .logging_config import get_logger
from .models import TodoEntity, touch, utcnow
from .repositories import Repository
from .schemas import TodoCreate, TodoUpdate
from .secrets_provider import DatabaseConfig

logger = get_logger(__name__)

metadata = MetaData()

todos_table = Table(
    "todos",
    metadata,
    Column("id", Uuid(as_uuid=True), primary_key=True),
    Column("text", Text, nullable=False),
    Column("completed", Boolean, default=False),
    Column("created_at", DateTime),
    Column("updated_at", DateTime),
)

_POSTGRES_SCHEMA = """
CREATE TABLE IF NOT EXISTS todos (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    text TEXT NOT NULL,
    completed BOOLEAN DEFAULT FALSE,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
)
"""


def _db_timestamp(value: datetime) -> datetime:
    # Columns are TIMESTAMP WITHOUT TIME ZONE holding UTC
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _row_to_entity(row: Mapping[str, Any]) -> TodoEntity:
    def as_utc(value: datetime) -> datetime:
        return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value

    return {
        "id": str(row["id"]),
        "text": str(row["text"]),
        "completed": bool(row["completed"]),
        "created_at": as_utc(row["created_at"]),
        "updated_at": as_utc(row["updated_at"]),
    }


def _parse_id(todo_id: str) -> uuid.UUID:
    # Ids that are not UUIDs cannot exist in the table
    try:
        return uuid.UUID(str(todo_id))
    except ValueError:
        raise NotFoundError(todo_id) from None


class SQLRepository(Repository):
    """
    Relational repository over a single `todos` table.

    Written against SQLAlchemy Core so the same statements run on PostgreSQL in
    production and on SQLite in tests. Listing is ordered by created_at, newest
    first. Update and delete are single statements with RETURNING.
    """

    name = "postgres"

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._init_db()

    @contextmanager
    def _begin(self) -> Generator[Connection, None, None]:
        try:
            with self._engine.begin() as conn:
                yield conn
        except SQLAlchemyError as e:
            logger.error("Database operation failed: %s", e)
            raise StoreError("Database operation failed") from e

    def _init_db(self) -> None:
        with self._begin() as conn:
            conn.execute(text("SELECT 1"))
            if self._engine.dialect.name == "postgresql":
                conn.execute(text(_POSTGRES_SCHEMA))
            else:
                metadata.create_all(conn, checkfirst=True)
        logger.info("Database schema initialized")

    def list_all(self) -> List[TodoEntity]:
        stmt = select(todos_table).order_by(todos_table.c.created_at.desc())
        with self._begin() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [_row_to_entity(r) for r in rows]

    def create(self, data: TodoCreate) -> TodoEntity:
        now = _db_timestamp(utcnow())
        stmt = (
            insert(todos_table)
            .values(id=uuid.uuid4(), text=data.text, completed=data.completed, created_at=now, updated_at=now)
            .returning(*todos_table.c)
        )
        with self._begin() as conn:
            row = conn.execute(stmt).mappings().one()
        return _row_to_entity(row)

    def update(self, todo_id: str, data: TodoUpdate) -> TodoEntity:
        uid = _parse_id(todo_id)
        # SET only the supplied columns, plus updated_at
        values = dict(data.changes())
        values["updated_at"] = _db_timestamp(touch())
        stmt = (
            update(todos_table)
            .where(todos_table.c.id == uid)
            .values(**values)
            .returning(*todos_table.c)
        )
        with self._begin() as conn:
            row = conn.execute(stmt).mappings().first()
        if row is None:
            raise NotFoundError(todo_id)
        return _row_to_entity(row)

    def delete(self, todo_id: str) -> TodoEntity:
        uid = _parse_id(todo_id)
        stmt = delete(todos_table).where(todos_table.c.id == uid).returning(*todos_table.c)
        with self._begin() as conn:
            row = conn.execute(stmt).mappings().first()
        if row is None:
            raise NotFoundError(todo_id)
        return _row_to_entity(row)

    def close(self) -> None:
        self._engine.dispose()
        logger.info("Database connection closed")


# PUBLIC_INTERFACE
def postgres_url(config: DatabaseConfig) -> URL:
    """Build the SQLAlchemy URL for a DatabaseConfig (psycopg 3 driver)."""
    return URL.create(
        "postgresql+psycopg",
        username=config.user,
        password=config.password,
        host=config.host,
        port=config.port,
        database=config.database,
        query={"sslmode": config.ssl_mode},
    )


# PUBLIC_INTERFACE
def connect_postgres(config: DatabaseConfig) -> SQLRepository:
    """
    Open a pooled engine for PostgreSQL, verify connectivity and create the
    schema if missing.
    """
    engine = create_engine(postgres_url(config), pool_pre_ping=True)
    try:
        repo = SQLRepository(engine)
    except StoreError:
        logger.error("Database connection failed for %s:%s/%s", config.host, config.port, config.database)
        engine.dispose()
        raise
    logger.info("Connected to PostgreSQL database at %s:%s/%s", config.host, config.port, config.database)
    return repo
