"""Module: session."""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from innovet.core.config import settings

# Shared engine; pre-ping drops stale pooled connections to the hosted database.
engine = create_engine(settings.database_url, pool_pre_ping=True)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
