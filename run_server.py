import os

import uvicorn

from pinpoint.config import settings
from utils.logging_utils import get_tagged_logger, setup_logging

logger = get_tagged_logger(__name__, tag="server")


if __name__ == "__main__":
    setup_logging(level=settings.log_level, job_name=settings.job_name)
    port = int(os.getenv("PORT", 8000))
    logger.info("Starting pinpoint-weather", extra={"port": port})

    uvicorn.run(
        "pinpoint.main:app",
        host="0.0.0.0",
        port=port,
        reload=False,
    )
