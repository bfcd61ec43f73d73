# ticketdesk/core/database.py
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from ticketdesk.core.logging import get_logger

logger = get_logger(__name__)

Base = declarative_base()


def make_engine(database_url: str) -> Engine:
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return create_engine(url, pool_pre_ping=True)

    connect_args = {"check_same_thread": False}
    if url.database in (None, "", ":memory:"):
        # one shared connection, otherwise every session gets an empty database
        return create_engine(url, connect_args=connect_args, poolclass=StaticPool)
    return create_engine(url, connect_args=connect_args)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def _statements(script: str) -> list[str]:
    # naive split: no ";" inside literals or trigger bodies, no trailing "--" comments
    lines = [line for line in script.splitlines() if not line.lstrip().startswith("--")]
    return [stmt.strip() for stmt in "\n".join(lines).split(";") if stmt.strip()]


def init_schema(engine: Engine, setup_sql: str | None) -> None:
    """Apply the schema script once; fall back to the ORM metadata without one."""
    path = Path(setup_sql) if setup_sql else None
    if path is None or not path.is_file():
        if path is not None:
            logger.warning("setup script %s not found, creating tables from metadata", path)
        # models register themselves on Base when imported
        import ticketdesk.ticket.models  # noqa: F401

        Base.metadata.create_all(bind=engine)
        return

    script = path.read_text(encoding="utf-8")
    if engine.dialect.name == "sqlite":
        # sqlite3 parses the whole script itself
        raw = engine.raw_connection()
        try:
            raw.driver_connection.executescript(script)
            raw.commit()
        finally:
            raw.close()
        logger.info("applied %s", path)
        return

    statements = _statements(script)
    with engine.begin() as conn:
        for stmt in statements:
            conn.exec_driver_sql(stmt)
    logger.info("applied %d statement(s) from %s", len(statements), path)
