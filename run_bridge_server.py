#!/usr/bin/env python3
"""Run an example API with its MCP endpoint"""

import argparse
import sys

import uvicorn

from mcp_rest_bridge.config import config
from mcp_rest_bridge.examples import advanced, basic
from mcp_rest_bridge.utils.logger import get_logger, setup_bridge_logging

EXAMPLES = {
    "basic": basic.create_app,
    "advanced": advanced.create_app
}


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("example", nargs="?", choices=sorted(EXAMPLES), default="basic")
    parser.add_argument("--host", default=config.server.host)
    parser.add_argument("--port", type=int, default=config.server.port)
    parser.add_argument("--debug", action="store_true")
    args = parser.parse_args()

    setup_bridge_logging(
        debug=args.debug,
        log_file=config.logging.file,
        fmt=config.logging.format,
        level=config.logging.level
    )
    logger = get_logger(__name__)
    if not config.validate():
        sys.exit(1)

    logger.debug(f"Configuration: {config.to_dict()}")

    app = EXAMPLES[args.example]()
    logger.info(f"REST API: http://{args.host}:{args.port}/api/")
    logger.info(f"MCP endpoint: http://{args.host}:{args.port}{config.server.base_path}")
    uvicorn.run(app, host=args.host, port=args.port, log_level="debug" if args.debug else "info")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        sys.exit(0)
    except Exception as e:
        print(f"Server error: {e}", file=sys.stderr)
        sys.exit(1)
