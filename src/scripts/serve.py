#!/usr/bin/env python3
"""
Serve the VIBE-RA web UI

Usage: python src/scripts/serve.py
"""

import sys
import logging
from pathlib import Path

# Add src/ to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from vibera.config import Config, ConfigError
from vibera.web.app import create_app

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


def main():
    """Main server entrypoint."""
    try:
        config = Config.load()
        logger.info(f"Config loaded: {config}")
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    server = config["server"]
    app = create_app(config)
    logger.info(f"🎵 VIBE-RA AI DJ at http://{server['host']}:{server['port']}")

    try:
        app.run(host=server["host"], port=server["port"], debug=server["debug"])
        return 0
    except KeyboardInterrupt:
        logger.warning("Server interrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
