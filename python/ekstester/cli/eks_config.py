#!/usr/bin/env python3
"""
ekstester/cli/eks_config.py

CLI to create and resolve EKS tester configuration files.

Usage example:
  python -m ekstester.cli.eks_config create --path /tmp/my-cluster.yaml
  python -m ekstester.cli.eks_config resolve --path /tmp/my-cluster.yaml

Both subcommands require the AWS CLI on PATH, write the fully resolved
config back to its config_path, and exit non-zero with the failing
invariant on stderr if resolution fails.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import NoReturn

from ekstester.config.checks import check_identity
from ekstester.config.defaults import new_default
from ekstester.config.paths import resolve_paths
from ekstester.config.resolver import resolve
from ekstester.models.eks_config import EKSConfig
from ekstester.utils.config_file import read_config, write_config
from ekstester.utils.host import require_aws_cli
from ekstester.utils.log_outputs import configure_logging

logger = logging.getLogger(__name__)


def main() -> NoReturn:
    """
    Entry point for the 'create' and 'resolve' subcommands.
    """
    parser = argparse.ArgumentParser(
        prog="ekstester.cli.eks_config",
        description="Create or resolve an EKS tester configuration file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    create_parser = subparsers.add_parser(
        "create",
        help="Write a new default configuration, fully resolved.",
    )
    create_parser.add_argument(
        "--path",
        default="",
        help="Config file to write (default: ./<name>-config.yaml).",
    )
    create_parser.add_argument(
        "--region",
        default=None,
        help="AWS region (default: us-west-2).",
    )
    create_parser.set_defaults(func=_create)

    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Fill in defaults for an existing configuration and validate it.",
    )
    resolve_parser.add_argument(
        "--path",
        required=True,
        help="Config file to read and rewrite.",
    )
    resolve_parser.set_defaults(func=_resolve)

    args = parser.parse_args()

    try:
        args.aws_cli_path = require_aws_cli()
        asyncio.run(args.func(args))
    except Exception as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
    else:
        sys.exit(0)


async def _create(args: argparse.Namespace) -> None:
    """
    Build a default config, resolve it, and write it out.
    """
    cfg = new_default(aws_cli_path=args.aws_cli_path)
    cfg.config_path = args.path
    if args.region is not None:
        cfg.region = args.region
    await _resolve_and_write(cfg)


async def _resolve(args: argparse.Namespace) -> None:
    """
    Read an existing config, resolve it, and write it back to --path.
    """
    cfg = await read_config(args.path)
    cfg.config_path = os.path.abspath(args.path)
    cfg.aws_cli_path = args.aws_cli_path
    await _resolve_and_write(cfg)


async def _resolve_and_write(cfg: EKSConfig) -> None:
    # log sinks are only final once the paths are resolved
    check_identity(cfg)
    resolve_paths(cfg)
    configure_logging(cfg.log_level, cfg.log_outputs)
    resolve(cfg)
    path = await write_config(cfg)
    logger.info("wrote resolved config for %r", cfg.name)
    print(path)


if __name__ == "__main__":
    main()
