"""Run the bate-papo server: python -m batepapo --port 5000"""
import argparse

import uvicorn

from .app import create_app
from .config import get_settings


def main() -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Run the bate-papo chat server.")
    parser.add_argument("--host", type=str, default=settings.host, help=f"Host to bind (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"Port to bind (default: {settings.port})")
    args = parser.parse_args()

    app = create_app(settings)
    uvicorn.run(app, host=args.host, port=args.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
