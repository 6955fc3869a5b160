"""
Command line entry point for cron hosts.

Usage:
    scorecard-blocks create     # book scorecard blocks after upcoming interviews
    scorecard-blocks reclaim    # delete generated blocks that are in the past
    scorecard-blocks token      # print a scheduler bearer token for the HTTP endpoints
"""

import argparse
import sys

from app.core import settings, setup_logging, get_logger
from app.exceptions import AppException

logger = get_logger(__name__)


def _run(job) -> int:
    from app.services import build_gateway, utcnow

    gateway = build_gateway(settings)
    try:
        result = job(gateway, utcnow(), settings.blocks)
    finally:
        gateway.close()
    print(result.model_dump_json(indent=2))
    return 0


def cmd_create(args) -> int:
    """Handle create subcommand."""
    from app.services import run_block_creator
    return _run(run_block_creator)


def cmd_reclaim(args) -> int:
    """Handle reclaim subcommand."""
    from app.services import run_block_reclaimer
    return _run(run_block_reclaimer)


def cmd_token(args) -> int:
    """Handle token subcommand."""
    from datetime import timedelta
    from app.api.v1.auth import create_scheduler_token

    if not settings.scheduler_jwt_secret:
        print("SCHEDULER_JWT_SECRET is not set", file=sys.stderr)
        return 1
    print(create_scheduler_token(settings.scheduler_jwt_secret, timedelta(days=args.days)))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scorecard-blocks",
        description="Reserve and reclaim interview scorecard time on your calendar",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    create_parser = subparsers.add_parser("create", help="Create blocks after upcoming interviews")
    create_parser.set_defaults(func=cmd_create)

    reclaim_parser = subparsers.add_parser("reclaim", help="Delete past generated blocks")
    reclaim_parser.set_defaults(func=cmd_reclaim)

    token_parser = subparsers.add_parser("token", help="Print a scheduler bearer token")
    token_parser.add_argument("--days", type=int, default=365, help="Token lifetime in days")
    token_parser.set_defaults(func=cmd_token)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    # stdout carries the JSON result
    setup_logging(stream=sys.stderr)
    try:
        return args.func(args)
    except AppException as e:
        logger.error(f"{args.command} failed: {e.message}", extra={"details": e.details})
        return 1


if __name__ == "__main__":
    sys.exit(main())
