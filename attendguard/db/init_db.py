# attendguard/db/init_db.py
import logging

from sqlalchemy.engine import Engine

from attendguard.db.base import Base
import attendguard.models  # noqa: F401  registra as tabelas no metadata

logger = logging.getLogger(__name__)

def init_db(bind: Engine) -> None:
    Base.metadata.create_all(bind=bind)
    logger.info("tables ready: %s", ", ".join(sorted(Base.metadata.tables)))
