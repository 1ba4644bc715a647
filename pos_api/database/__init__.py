from pos_api.database.base import Base
from pos_api.database.engine import build_engine, engine, ensure_sqlite_schema
from pos_api.database.session import SessionLocal

__all__ = ["Base", "SessionLocal", "build_engine", "engine", "ensure_sqlite_schema"]
