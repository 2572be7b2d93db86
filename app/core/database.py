from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from typing import Generator
from .config import settings

def build_engine(url: str):
    """Create an engine, with SQLite connections usable across threads."""
    connect_args = {}
    if url.startswith("sqlite"):
        # TestClient and uvicorn's threadpool hand sessions between threads
        connect_args["check_same_thread"] = False
    return create_engine(url, connect_args=connect_args)

engine = build_engine(settings.get_database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# Database dependency
def get_db() -> Generator[Session, None, None]:
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

# Database initialization
def init_db(bind=None):
    """Initialize database tables."""
    # Import models so they register on Base.metadata
    from ..models import user, doctor, appointment  # noqa: F401
    Base.metadata.create_all(bind=bind or engine)
