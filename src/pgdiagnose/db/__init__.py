from pgdiagnose.db.connection import Connection, open_connection
from pgdiagnose.db.exceptions import ConnectionFailedError

__all__ = ["Connection", "ConnectionFailedError", "open_connection"]
