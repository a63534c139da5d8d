import logging

from cosmos2048.config import Settings
from cosmos2048.server import create_app


if __name__ == "__main__":
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = create_app(settings)
    logging.getLogger(__name__).info(
        "Cosmos 2048 API running on port %d", settings.port
    )
    app.run(host=settings.host, port=settings.port, threaded=True)
