# marketplace/database/session.py
from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker

from marketplace.config.settings import DATABASE_URL, DB_ECHO

Base = declarative_base()


def enable_sqlite_savepoints(engine):
    """pysqlite opens transactions lazily, which breaks SAVEPOINT; take over BEGIN ourselves."""

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


def build_engine(url: str, **kwargs):
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        return enable_sqlite_savepoints(create_engine(url, echo=DB_ECHO, future=True, **kwargs))
    return create_engine(url, echo=DB_ECHO, pool_pre_ping=True, future=True, **kwargs)


engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
