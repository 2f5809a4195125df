from __future__ import annotations

import argparse
import sys

import uvicorn
from loguru import logger

from draughts.config import RuleOptions

from .app import create_app


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	parser = argparse.ArgumentParser(description="Run the English draughts rules engine API.")
	parser.add_argument("--host", default="0.0.0.0", help="Bind host for the API server.")
	parser.add_argument("--port", type=int, default=8000, help="Port for the API server.")
	parser.add_argument("--reload", action="store_true", help="Enable autoreload (development only).")
	parser.add_argument("--log-level", default="info", help="Log level for uvicorn and the engine.")
	parser.add_argument(
		"--no-mandatory-capture",
		dest="mandatory_capture",
		action="store_false",
		help="Allow quiet moves even when a capture is available.",
	)
	return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
	args = parse_args(argv)
	logger.remove()
	logger.add(sys.stderr, level=args.log_level.upper())

	if args.reload:
		# Reload imports the module-level app, built with default rules.
		if not args.mandatory_capture:
			logger.warning("--no-mandatory-capture is ignored with --reload")
		target = "draughts_server.app:app"
	else:
		target = create_app(RuleOptions(mandatory_capture=args.mandatory_capture))

	uvicorn.run(
		target,
		host=args.host,
		port=args.port,
		reload=args.reload,
		log_level=args.log_level,
	)


if __name__ == "__main__":
	main()
