from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from ..app.config import Config
from ..utils.logger import get_logger

logger = get_logger()


def make_engine(url: str = None):
    """Create an engine; SQLite needs cross-thread access for the catalog worker pool."""
    url = url or Config.DATABASE_URL
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args)


# Create the SQLAlchemy engine
engine = make_engine()

# Create a configured "Session" class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create a base class for our models
Base = declarative_base()

def create_tables(bind=None):
    """Create all tables in the database."""
    # Models must be imported so they register with Base.metadata
    from .models import MenuItem, ArtItem, Workshop  # noqa: F401
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Catalog tables ready")

if __name__ == "__main__":
    create_tables()
