"""Run the widget server: ``python -m bounty_widget [--config PATH]``."""

from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

import uvicorn

from bounty_widget.core.config import WidgetConfig
from bounty_widget.core.container import DIContainer

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Serve the bounty stats widget.")
    parser.add_argument(
        "--config", help="JSON or YAML config file; defaults to the environment"
    )
    args = parser.parse_args(argv)

    config = WidgetConfig.from_file(args.config) if args.config else WidgetConfig.from_env()
    logging.basicConfig(level=config.log_level.upper(), format=LOG_FORMAT)

    app = DIContainer.create_app(config)
    logger = logging.getLogger("bounty_widget")
    base = f"http://localhost:{config.port}"
    logger.info("Bounty Stats Widget running on %s", base)
    logger.info("  Widget:     %s/widget", base)
    logger.info("  API:        %s/api/stats", base)
    logger.info("  Embed JS:   %s/embed.js", base)
    logger.info("  Docs:       %s/", base)

    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())


if __name__ == "__main__":
    main()
