#!/usr/bin/env python3
"""
SSR Gate Server — Entry Point

Loads .env, configures logging, builds the demo host app with the SSR gate
in front of it and runs the development server. Under a production WSGI
server point it at `server:app` instead.

Start:
    venv/bin/python3 server.py
"""

import logging
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables before config is read
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path)

from config.loader import config  # noqa: E402

logging.basicConfig(
    level=getattr(logging, str(config.get("logging.level", "INFO")).upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

from app import create_app  # noqa: E402

app = create_app()


if __name__ == "__main__":
    host = config.get("server.host", "0.0.0.0")
    port = int(config.get("server.port", 8080))
    logger.info("Starting SSR gate on %s:%d", host, port)
    app.run(host=host, port=port, threaded=True)
