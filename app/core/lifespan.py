from contextlib import asynccontextmanager
import json
import logging

from app.ai.config import load_ai_config
from app.store.records import init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    init_db()
    cfg = load_ai_config()
    logger.info(json.dumps({"event": "startup", "ai_provider": cfg.provider, "ai_model": cfg.model}))
    yield
