from contextlib import asynccontextmanager
import logging

from skillproof.core.config import get_scoring_config
from skillproof.taxonomy import get_default_taxonomy

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    # Load both config files once so a broken file fails startup.
    config = get_scoring_config()
    taxonomy = get_default_taxonomy()
    logger.info(
        "engine_warmup scoring_sections=%s expected_technologies=%s",
        len(config),
        len(taxonomy.expected_technologies()),
    )
    yield
