from contextlib import asynccontextmanager
import logging
from pathlib import Path

from app.analysis import get_default_engine
from app.core.config import settings
from app.storage.analysis_store import init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    Path(settings.uploads_dir).mkdir(parents=True, exist_ok=True)
    init_db()
    engine = get_default_engine()
    logger.info(
        "ats_engine_ready pattern_groups=%s stop_words=%s rules_path=%s",
        len(engine.rules.keyword_patterns),
        len(engine.rules.stop_words),
        settings.ats_rules_path or "builtin",
    )
    yield
