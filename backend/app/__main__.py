"""Run the API: ``python -m app [--reset] [--host HOST] [--port PORT]``."""

import argparse

import uvicorn
from loguru import logger

from . import config
from .database import engine, init_db
from .logging_config import setup_logging


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(prog="app", description="Products and clients API")
    parser.add_argument("--reset", action="store_true", help="drop and recreate all tables before serving")
    parser.add_argument("--host", default=config.HOST)
    parser.add_argument("--port", type=int, default=config.PORT)
    args = parser.parse_args(argv)

    setup_logging()
    if args.reset:
        init_db(engine, reset=True)
        logger.info("Database recreated at {}", engine.url)

    logger.info("API is running on port {}", args.port)
    uvicorn.run("app.main:app", host=args.host, port=args.port, log_config=None)


if __name__ == "__main__":
    main()
