from __future__ import annotations

from loguru import logger

from flipnews import create_app
from flipnews.config import BaseConfig

config = BaseConfig()
app = create_app(config)


if __name__ == "__main__":
    logger.info(f"Server running on http://localhost:{config.PORT}")
    app.run(port=config.PORT)
