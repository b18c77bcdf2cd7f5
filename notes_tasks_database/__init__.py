from .db import create_db_engine, create_session_factory, get_database_url
from .models import Base, Note, Task, User

__all__ = [
    "Base",
    "Note",
    "Task",
    "User",
    "create_db_engine",
    "create_session_factory",
    "get_database_url",
]
