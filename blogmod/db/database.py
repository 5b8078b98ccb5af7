from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
import os
from typing import Optional
from functools import lru_cache

# Database URLs per environment
SQLITE_DEV_DB = "sqlite:///./dev.db"
SQLITE_TEST_DB = "sqlite:///./test.db"
SQLITE_PROD_DB = "sqlite:///./prod.db"

Base = declarative_base()

def get_database_url(env: str) -> str:
    """Resolve the database URL for an environment"""
    if env == "test":
        return SQLITE_TEST_DB
    if env == "production":
        return os.getenv("DATABASE_URL", SQLITE_PROD_DB)
    return SQLITE_DEV_DB

@lru_cache()
def get_engine():
    """Get the database engine"""
    database_url = get_database_url(os.getenv("APP_ENV", "development"))
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, connect_args=connect_args)

def get_session_maker():
    """Get the session factory"""
    return sessionmaker(autocommit=False, autoflush=False, bind=get_engine())

def get_session():
    """Yield a request-scoped database session"""
    SessionLocal = get_session_maker()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()

def create_tables(db_engine: Optional[object] = None):
    """Create all tables

    Args:
        db_engine: optional engine, the default engine is used when omitted
    """
    # register every model on the metadata before creating
    from blogmod.models import blog, comment, user  # noqa: F401

    engine = db_engine or get_engine()
    Base.metadata.create_all(bind=engine)
