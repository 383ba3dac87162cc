from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from portal.core.config import settings

# Support both PostgreSQL and SQLite via centralized settings
DATABASE_URL = settings.database_url

if DATABASE_URL.startswith("postgresql"):
    engine = create_engine(DATABASE_URL)
else:
    # SQLite configuration for local development/testing
    engine = create_engine(
        DATABASE_URL, connect_args={"check_same_thread": False}
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def init_db():
    """
    Registers all models and initializes the database schema.
    This should be called during the application startup lifespan.
    """
    from portal.models import portal_setting  # noqa: F401
    Base.metadata.create_all(bind=engine)
