from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import settings

DATABASE_URL = settings.DATABASE_URL

# If using sqlite file, ensure check_same_thread option
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith('sqlite') else {}


def enable_sqlite_foreign_keys(engine):
    """SQLite ignores ON DELETE rules unless every connection opts in."""
    if engine.dialect.name != 'sqlite':
        return

    @event.listens_for(engine, "connect")
    def _foreign_keys_on(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# create engine with pool_pre_ping for reliability with some DB providers
engine = create_engine(DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)
enable_sqlite_foreign_keys(engine)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def apply_changes(target, changes: dict, nullable=()):
    """Copy the fields a client sent onto ``target``; null only clears ``nullable`` ones."""
    for field, value in changes.items():
        if value is None and field not in nullable:
            continue
        setattr(target, field, value)
    return target
