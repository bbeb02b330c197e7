from .client import INDEXES, create_client, ensure_indexes, get_database, ping

__all__ = ["INDEXES", "create_client", "ensure_indexes", "get_database", "ping"]
