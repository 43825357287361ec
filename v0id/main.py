"""Entry point: restore the mind and start the server."""

import logging

import uvicorn

from v0id.brain import Brain
from v0id.config import config
from v0id.server import create_app

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(name)s] %(message)s",
    datefmt="%H:%M:%S",
)


def main():
    brain = Brain.from_settings(config)
    app = create_app(brain)

    port = int(config.get("port", 8080))
    print(f"\n  v0id is thinking. Open http://localhost:{port}/api/status to watch\n")
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
