from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from functools import lru_cache
from typing import Optional
from app.core_settings import get_settings, get_database_url
from app.errors import StoreError
from app.infrastructure.schema import drop_schema
from shared.core import get_logger

logger = get_logger(__name__)

def _configure_sqlite_connection(dbapi_connection, connection_record):
    # Let SQLAlchemy emit BEGIN itself so SAVEPOINT and transactional DDL work
    dbapi_connection.isolation_level = None
    # SQLite ignores ON DELETE actions unless this is set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

def _begin_sqlite_transaction(conn):
    conn.exec_driver_sql("BEGIN")

def create_db_engine(url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    settings = get_settings()
    engine = create_engine(
        url or get_database_url(settings),
        echo=settings.DB_ECHO if echo is None else echo,
        future=True,
        pool_pre_ping=True,
    )
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _configure_sqlite_connection)
        event.listen(engine, "begin", _begin_sqlite_transaction)
    return engine

@lru_cache
def get_engine() -> Engine:
    return create_db_engine()

SessionLocal = sessionmaker(autoflush=False, expire_on_commit=False)

def server_engine(engine: Engine) -> Engine:
    """Engine on the server's maintenance database, in autocommit mode.

    SQLite has no server, so the engine itself is returned.
    """
    dialect = engine.dialect.name
    if dialect == "sqlite":
        return engine
    if dialect in ("mysql", "mariadb"):
        server_url = engine.url.set(database=None)
    elif dialect == "postgresql":
        server_url = engine.url.set(database="postgres")
    else:
        raise StoreError(f"Cannot manage databases on dialect '{dialect}'")
    return create_engine(server_url, isolation_level="AUTOCOMMIT")

def recreate_database(engine: Engine) -> Engine:
    """Drop the target database and create it again, empty.

    Destructive and irreversible. SQLite files keep the file and lose every
    table; server databases are dropped and recreated with UTF-8 (utf8mb4 on
    MySQL) encoding.
    """
    settings = get_settings()
    dialect = engine.dialect.name
    name = engine.url.database
    logger.warning(
        f"Dropping and recreating database {name}",
        extra={'extra_fields': {'database': name, 'dialect': dialect}}
    )
    if dialect == "sqlite":
        drop_schema(engine)
        return engine

    quoted = engine.dialect.identifier_preparer.quote(name)
    if dialect == "postgresql":
        create_stmt = f"CREATE DATABASE {quoted} ENCODING 'UTF8' TEMPLATE template0"
    else:
        create_stmt = f"CREATE DATABASE {quoted} CHARACTER SET = {settings.DB_CHARSET} COLLATE = {settings.DB_COLLATION}"

    server = server_engine(engine)
    engine.dispose()
    try:
        with server.connect() as conn:
            conn.execute(text(f"DROP DATABASE IF EXISTS {quoted}"))
            conn.execute(text(create_stmt))
    finally:
        server.dispose()
    return engine
