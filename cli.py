"""Command line for the employee directory.

Usage:
    python cli.py init-db                    # create missing tables
    python cli.py serve                      # run the API + browser client
    python cli.py serve --port 8080 --reload
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from config import API_HOST, API_PORT, DATABASE_URL
from logger_config import setup_logger

logger = setup_logger("cli")


def run_init_db() -> bool:
    """Create the directory tables against the configured database."""
    from sqlalchemy.exc import SQLAlchemyError

    from db.database import create_store_engine, init_db

    engine = create_store_engine()
    try:
        init_db(engine)
    except SQLAlchemyError as e:
        logger.error(f"Schema creation failed: {e}")
        return False
    finally:
        engine.dispose()

    logger.info(f"Tables ready at {engine.url.render_as_string(hide_password=True)}")
    return True


def run_server(host: str, port: int, reload: bool) -> None:
    import uvicorn

    logger.info(f"Serving on http://{host}:{port} (database: {DATABASE_URL.split(':', 1)[0]})")
    uvicorn.run("api.main:app", host=host, port=port, reload=reload)


def main():
    parser = argparse.ArgumentParser(description="Employee Directory admin CLI")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create missing tables")

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=API_HOST)
    serve.add_argument("--port", type=int, default=API_PORT)
    serve.add_argument("--reload", action="store_true", help="Restart on code changes (development)")

    args = parser.parse_args()

    if args.command == "init-db":
        sys.exit(0 if run_init_db() else 1)
    run_server(args.host, args.port, args.reload)


if __name__ == "__main__":
    main()
