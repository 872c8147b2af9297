import logging

import uvicorn

from src.api import create_app
from src.config import get_config


def main() -> None:
    config = get_config()
    logging.basicConfig(
        level=config.logging.level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = create_app(allow_origins=list(config.cors.allow_origins))
    logging.getLogger(__name__).info(
        f"Server listening at http://localhost:{config.server.port}"
    )
    uvicorn.run(app, host=config.server.host, port=config.server.port)


if __name__ == "__main__":
    main()
