# attendguard/core/logging.py
import logging
from typing import Optional

from attendguard.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

def setup_logging(level: Optional[str] = None) -> None:
    """Configura o root logger uma única vez (chamadas repetidas só ajustam o nível)."""
    root = logging.getLogger()
    level_name = (level or settings.LOG_LEVEL).upper()
    root.setLevel(getattr(logging, level_name, logging.INFO))
    if any(getattr(h, "_attendguard", False) for h in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._attendguard = True  # type: ignore[attr-defined]
    root.addHandler(handler)
