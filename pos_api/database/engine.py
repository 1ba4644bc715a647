import logging
import sqlite3

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, Engine
from sqlalchemy.pool import StaticPool

from pos_api.config import Settings, get_settings
from pos_api.database.url import normalize_database_url


app_settings: Settings = get_settings()
logger = logging.getLogger(__name__)

_SQLITE_BUSY_TIMEOUT_SECONDS = 30
_SQLITE_BUSY_TIMEOUT_MS = _SQLITE_BUSY_TIMEOUT_SECONDS * 1000


def _is_sqlite_memory(url: URL) -> bool:
    sqlite_db = url.database
    if sqlite_db in (None, "", ":memory:"):
        return True
    return url.query.get("mode") == "memory"


def _install_sqlite_hooks(engine: Engine, *, is_memory: bool) -> None:
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragmas(dbapi_connection, _connection_record):
        # pysqlite defers BEGIN until the first write; take over so a unit
        # of work holds the write lock from its first read
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.execute(f"PRAGMA busy_timeout={_SQLITE_BUSY_TIMEOUT_MS}")
            if not is_memory:
                try:
                    cursor.execute("PRAGMA journal_mode=WAL")
                    cursor.execute("PRAGMA synchronous=NORMAL")
                except sqlite3.DatabaseError:
                    pass
        finally:
            cursor.close()

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(database_url, settings: Settings | None = None) -> Engine:
    settings = settings or get_settings()
    if isinstance(database_url, URL):
        url = database_url
    else:
        url = normalize_database_url(database_url, force_ipv4=settings.DB_FORCE_IPV4)

    backend = url.get_backend_name()
    connect_args: dict[str, object] = {}
    engine_kwargs: dict[str, object] = dict(pool_pre_ping=True)

    is_memory = False
    if backend == "sqlite":
        is_memory = _is_sqlite_memory(url)
        connect_args = {"check_same_thread": False, "timeout": _SQLITE_BUSY_TIMEOUT_SECONDS}
        if is_memory:
            engine_kwargs.update(poolclass=StaticPool)
    else:
        engine_kwargs.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_recycle=settings.DB_POOL_RECYCLE_SECONDS,
        )
        if backend == "postgresql":
            connect_args["connect_timeout"] = settings.DB_CONNECT_TIMEOUT
            if settings.DB_STATEMENT_TIMEOUT_MS:
                connect_args["options"] = "-c statement_timeout={}".format(
                    int(settings.DB_STATEMENT_TIMEOUT_MS)
                )

    engine = create_engine(url, connect_args=connect_args, **engine_kwargs)
    if backend == "sqlite":
        _install_sqlite_hooks(engine, is_memory=is_memory)
    return engine


engine = build_engine(app_settings.DATABASE_URL, app_settings)


_SQLITE_COLUMN_DEFAULTS = {
    "products": {
        "category_id": "INTEGER REFERENCES categories(id) ON DELETE SET NULL",
    },
    "transaction_details": {
        "product_name": "TEXT NOT NULL DEFAULT ''",
    },
}

_SQLITE_POST_ADD_UPDATES = {
    ("transaction_details", "product_name"): (
        "UPDATE transaction_details SET product_name = COALESCE("
        "(SELECT name FROM products WHERE products.id = transaction_details.product_id), '') "
        "WHERE product_name = ''"
    ),
}


def _escape_sqlite_identifier(value: str) -> str:
    return value.replace('"', '""')


def _get_sqlite_columns(conn, table_name: str):
    escaped_table = _escape_sqlite_identifier(table_name)
    # noinspection SqlNoDataSourceInspection
    result = conn.exec_driver_sql(
        f'PRAGMA table_info("{escaped_table}")'
    ).mappings()
    return {row["name"] for row in result}


def ensure_sqlite_schema(bind: Engine | None = None):
    """Add columns that databases created by older releases are missing."""
    bind = bind if bind is not None else engine
    if bind.dialect.name != "sqlite":
        return []
    added_columns = []
    with bind.connect() as conn:
        with conn.begin():
            for table_name, columns in _SQLITE_COLUMN_DEFAULTS.items():
                existing = _get_sqlite_columns(conn, table_name)
                if not existing:
                    continue
                for column_name, ddl in columns.items():
                    if column_name in existing:
                        continue
                    escaped_table = _escape_sqlite_identifier(table_name)
                    escaped_column = _escape_sqlite_identifier(column_name)
                    # noinspection SqlNoDataSourceInspection
                    conn.exec_driver_sql(
                        f'ALTER TABLE "{escaped_table}" ADD COLUMN "{escaped_column}" {ddl}'
                    )
                    added_columns.append((table_name, column_name))
            for table_name, column_name in added_columns:
                update_stmt = _SQLITE_POST_ADD_UPDATES.get((table_name, column_name))
                if update_stmt:
                    # noinspection SqlNoDataSourceInspection
                    conn.exec_driver_sql(update_stmt)
    for table_name, column_name in added_columns:
        logger.info("Added missing column %s.%s", table_name, column_name)
    return added_columns
