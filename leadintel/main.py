"""Lead intelligence API: main entry point."""

import logging

import uvicorn

from leadintel.config import settings
from leadintel.database import init_db


def main():
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    init_db()
    print(f"API: http://{settings.api_host}:{settings.api_port}/docs")
    uvicorn.run(
        "leadintel.web.app:app",
        host=settings.api_host,
        port=settings.api_port,
    )


if __name__ == "__main__":
    main()
