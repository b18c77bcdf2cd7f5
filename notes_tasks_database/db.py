import os
from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker
from dotenv import load_dotenv

DEFAULT_DB_FILE = "./auth-notes-tasks.sqlite"


# PUBLIC_INTERFACE
def get_database_url():
    """
    Retrieves the database URL from the environment variable DATABASE_URL.
    Falls back to a SQLite file (DB_FILE, or ./auth-notes-tasks.sqlite).
    """
    load_dotenv()
    db_url = os.getenv("DATABASE_URL")
    if db_url:
        return db_url
    return f"sqlite:///{os.getenv('DB_FILE', DEFAULT_DB_FILE)}"


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# PUBLIC_INTERFACE
def create_db_engine(database_url, **kwargs):
    """
    Creates an engine for the given URL.

    SQLite connections are shared across FastAPI's worker threads and get
    foreign key enforcement switched on, so ON DELETE CASCADE applies.
    """
    is_sqlite = make_url(database_url).get_backend_name() == "sqlite"
    if is_sqlite:
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        kwargs["connect_args"] = connect_args
    engine = create_engine(database_url, future=True, echo=False, **kwargs)
    if is_sqlite:
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


# PUBLIC_INTERFACE
def create_session_factory(engine):
    """Returns a session factory bound to the engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
