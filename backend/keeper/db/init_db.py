import logging

from sqlalchemy.engine import Engine

from keeper.db.base import Base
from keeper.models.secret import Secret  # noqa: F401
from keeper.models.user import User  # noqa: F401

logger = logging.getLogger(__name__)


def init_db(engine: Engine) -> None:
    """Create all database tables"""
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created", extra={"tables": sorted(Base.metadata.tables)})
