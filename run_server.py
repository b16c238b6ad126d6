import os

import uvicorn

from weathercore.config import settings
from utils.logging_utils import get_tagged_logger, setup_logging

logger = get_tagged_logger(__name__, tag="server")


if __name__ == "__main__":
    setup_logging(level=settings.log_level, job_name="weathercore")
    logger.info("Starting weathercore API", extra={"data_source": settings.data_source})

    uvicorn.run(
        "weathercore.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", 8000)),
        reload=False,
    )
