"""Database engine and session management."""
from contextlib import contextmanager
from typing import Any, Dict, Generator, Iterator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from campusqa.config.settings import settings
from campusqa.core.logging import get_logger

logger = get_logger(__name__)

# Execution option naming the SQLite BEGIN mode (DEFERRED, IMMEDIATE, EXCLUSIVE)
SQLITE_BEGIN_OPTION = "sqlite_begin"


def configure_sqlite_engine(engine: Engine) -> Engine:
    """
    Take over transaction control from the pysqlite driver.

    The driver normally defers BEGIN until the first write, which makes
    explicit isolation impossible. With this in place every transaction
    starts with an explicit BEGIN whose mode can be chosen per connection
    through the ``sqlite_begin`` execution option.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        mode = conn.get_execution_options().get(SQLITE_BEGIN_OPTION, "DEFERRED")
        conn.exec_driver_sql(f"BEGIN {mode}")

    return engine


# Session.info keys used by track_writes
_WRITES_TRACKED = "campusqa.writes_tracked"
_UNCOMMITTED_WRITES = "campusqa.uncommitted_writes"


def track_writes(session: Session) -> Session:
    """
    Remember whether the open transaction has written anything.

    Repositories flush eagerly and run bulk UPDATE/DELETE statements, so
    ``session.new``/``dirty``/``deleted`` alone cannot tell a read-only
    transaction from a write in progress.
    """
    if session.info.get(_WRITES_TRACKED):
        return session
    session.info[_WRITES_TRACKED] = True

    @event.listens_for(session, "after_flush")
    def _on_flush(sess, flush_context):
        sess.info[_UNCOMMITTED_WRITES] = True

    @event.listens_for(session, "do_orm_execute")
    def _on_execute(orm_execute_state):
        if not orm_execute_state.is_select:
            orm_execute_state.session.info[_UNCOMMITTED_WRITES] = True

    @event.listens_for(session, "after_commit")
    def _on_commit(sess):
        sess.info.pop(_UNCOMMITTED_WRITES, None)

    @event.listens_for(session, "after_rollback")
    def _on_rollback(sess):
        sess.info.pop(_UNCOMMITTED_WRITES, None)

    return session


def has_uncommitted_writes(session: Session) -> bool:
    """True if the session holds pending objects or flushed, uncommitted writes."""
    return bool(session.new or session.dirty or session.deleted or session.info.get(_UNCOMMITTED_WRITES))


def create_engine_from_settings(
    url: Optional[str] = None,
    echo: Optional[bool] = None,
    **kwargs: Any,
) -> Engine:
    """
    Build an engine for the configured database.

    Pool sizing applies to server databases only; SQLite engines get the
    transaction-control hooks from configure_sqlite_engine instead.
    """
    url = url or settings.get_database_url()
    options: Dict[str, Any] = {
        "echo": settings.DB_ECHO if echo is None else echo,
        "pool_pre_ping": True,
    }

    if url.startswith("sqlite"):
        connect_args = dict(settings.DB_CONNECT_ARGS)
        connect_args.setdefault("check_same_thread", False)
        options["connect_args"] = connect_args
    else:
        options["pool_size"] = settings.DB_POOL_SIZE
        options["max_overflow"] = settings.DB_POOL_OVERFLOW
        if settings.DB_CONNECT_ARGS:
            options["connect_args"] = dict(settings.DB_CONNECT_ARGS)

    options.update(kwargs)
    engine = create_engine(url, **options)

    if engine.dialect.name == "sqlite":
        configure_sqlite_engine(engine)

    logger.debug(f"Created engine for dialect {engine.dialect.name}")
    return engine


engine = create_engine_from_settings()

SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    expire_on_commit=False,
)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency function that yields a database session.

    Usage in FastAPI endpoints:
        @router.get("/reviews/latest")
        def latest(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope(session_factory: sessionmaker = SessionLocal) -> Iterator[Session]:
    """
    Provide a transactional scope around a series of operations.

    Commits on success, rolls back on any exception and always closes.
    """
    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
