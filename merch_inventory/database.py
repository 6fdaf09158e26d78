# merch_inventory/database.py
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def normalize_url(url: str) -> str:
    # SQLAlchemy wymaga "postgresql://", a Azure/Heroku podają "postgres://"
    if url and url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


def make_engine(url: str) -> Engine:
    url = normalize_url(url)

    if "sqlite" in url:
        # Tylko dla SQLite: wielowątkowy serwer + czekanie na blokadę zapisu
        connect_args = {"check_same_thread": False, "timeout": 30}
    else:
        connect_args = {}

    kwargs = {}
    if url in ("sqlite://", "sqlite:///:memory:"):
        # In-memory database must be shared by every session
        kwargs["poolclass"] = StaticPool

    engine = create_engine(url, connect_args=connect_args, **kwargs)

    if "sqlite" in url:
        @event.listens_for(engine, "connect")
        def _sqlite_pragmas(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys = ON")
            cursor.close()

    return engine


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    # Models must be imported so their tables are registered on Base.metadata
    import merch_inventory.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
