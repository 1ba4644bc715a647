from pos_api.database.session import get_db


__all__ = ["get_db"]
