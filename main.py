"""
Entry point to run the API server.
"""
import logging

import uvicorn

from core.config import load_settings


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    # Fail before binding the port if configuration is incomplete.
    settings = load_settings()
    uvicorn.run("app.api:app", host="0.0.0.0", port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
