"""
Database initialization/migration script.

Run this script to create all required tables in the database.
"""
from notes_tasks_database.db import create_db_engine, get_database_url
from notes_tasks_database.models import Base


# PUBLIC_INTERFACE
def init_db(engine):
    """Initializes the database by creating all tables if they do not exist."""
    Base.metadata.create_all(bind=engine)


if __name__ == "__main__":
    init_db(create_db_engine(get_database_url()))
    print("Database tables created successfully.")
