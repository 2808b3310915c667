"""Engine and session factory for the Content Platform database."""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from contentplatform.core.config import get_settings


def _enable_sqlite_savepoints(engine: Engine) -> None:
    # pysqlite defers BEGIN on its own, which breaks SAVEPOINT; let
    # SQLAlchemy emit BEGIN itself instead.
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine; SQLite URLs get thread sharing and savepoint support."""
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(database_url, echo=echo, **kwargs)
        _enable_sqlite_savepoints(engine)
        return engine
    return create_engine(database_url, echo=echo, pool_pre_ping=True)


settings = get_settings()

engine = build_engine(settings.database_url, echo=settings.database_echo)

SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
