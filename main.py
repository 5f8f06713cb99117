"""
Chat-artifacts server entry point.
"""
import logging
import os

import uvicorn

from config import PreferenceStore, default_preferences_path, load_config
from config.defaults import DEFAULT_HOST, DEFAULT_PORT
from server import app, configure
from server.logging_config import setup_logging

# Initialize logging before anything else
setup_logging()
logger = logging.getLogger(__name__)


def main() -> None:
    """Load configuration and start the server."""
    config = load_config()
    configure(config, PreferenceStore(default_preferences_path()))

    host = os.environ.get("HOST", DEFAULT_HOST)
    port = int(os.environ.get("PORT", str(DEFAULT_PORT)))

    logger.info("Upstream chat API: %s", config.api_base_url)
    logger.info("Server listening on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
