import os

import uvicorn

from skyfeed.config import settings
from utils.logging_utils import get_tagged_logger, setup_logging

logger = get_tagged_logger(__name__, tag="server")


if __name__ == "__main__":
    setup_logging(level=settings.log_level, service_name="skyfeed")
    logger.info("Starting SkyFeed API", extra={"default_source": settings.default_source})

    uvicorn.run(
        "skyfeed.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", 8000)),
        reload=False,
    )
