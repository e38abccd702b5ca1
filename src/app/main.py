"""
Example app entrypoint.

Serves the FastAPI example form with uvicorn.

Usage:
    uv run python -m app.main --host 127.0.0.1 --port 8080
"""

from __future__ import annotations

import argparse
import logging
import sys

import uvicorn

from app.server import app


def main(argv: list[str] | None = None) -> None:
    """Console entrypoint that serves the example form.

    Args:
        argv (list[str] | None): Optional list of CLI arguments. If None,
            sys.argv[1:] is used.
    """
    args = list(sys.argv[1:] if argv is None else argv)

    parser = argparse.ArgumentParser(description="formmodel example app")
    parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    parser.add_argument("--port", type=int, default=8080, help="Port to listen on.")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Root logging level.",
    )
    ns = parser.parse_args(args)

    logging.basicConfig(
        level=getattr(logging, ns.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )
    uvicorn.run(app, host=ns.host, port=ns.port)


if __name__ == "__main__":
    main()
