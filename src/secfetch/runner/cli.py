"""Command-line interface: rewrite stdin to stdout, resolving secret placeholders."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys

from secfetch.core.config.base import LogLevel
from secfetch.core.config.loader import load_config
from secfetch.core.config.settings import SecfetchConfig
from secfetch.core.secrets.pipeline import ResolutionPipeline
from secfetch.core.secrets.registry import build_providers
from secfetch.runner.driver import SecretsStreamRunner


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="secfetch",
        description=(
            "Read text from stdin, replace ssm://, secrets://, env:// and base64:// "
            "placeholders with secret values, and write the result to stdout."
        ),
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a HOCON configuration file.",
    )
    parser.add_argument(
        "--ignore-errors",
        action="store_true",
        default=None,
        help="Log unresolved placeholders but continue and exit 0 (env: SEC_IGNORE_ERR).",
    )
    parser.add_argument(
        "--retries",
        type=int,
        default=None,
        help="Fetch attempts per placeholder (env: RETRIES, default: 3).",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds allowed for all fetches on one line (env: SEC_TIMEOUT, default: 30).",
    )
    parser.add_argument("--ssm-prefix", default=None, help="SSM trigger (env: SEC_SSM_PREFIX).")
    parser.add_argument(
        "--secrets-prefix", default=None, help="Secrets Manager trigger (env: SEC_SECRETS_PREFIX)."
    )
    parser.add_argument("--env-prefix", default=None, help="Environment trigger (env: SEC_ENV_PREFIX).")
    parser.add_argument(
        "--base64-prefix", default=None, help="Base-64 trigger (env: SEC_BASE64_PREFIX)."
    )
    parser.add_argument("--aws-region", default=None, help="AWS region for SSM and Secrets Manager.")
    parser.add_argument("--aws-profile", default=None, help="AWS shared-config profile.")
    parser.add_argument(
        "--log-level",
        choices=[level.value for level in LogLevel],
        default=None,
        help="Set the logging level (default: INFO).",
    )
    return parser


_FLAG_FIELDS = {
    "ignore_errors": "ignore_errors",
    "retries": "retries",
    "timeout": "timeout_seconds",
    "ssm_prefix": "ssm_prefix",
    "secrets_prefix": "secrets_prefix",
    "env_prefix": "env_prefix",
    "base64_prefix": "base64_prefix",
    "aws_region": "aws_region",
    "aws_profile": "aws_profile",
    "log_level": "log_level",
}


def _resolve_config(args: argparse.Namespace) -> SecfetchConfig:
    config = load_config(args.config)
    changes = {
        field_name: getattr(args, arg_name)
        for arg_name, field_name in _FLAG_FIELDS.items()
        if getattr(args, arg_name) is not None
    }
    if "log_level" in changes:
        changes["log_level"] = LogLevel(changes["log_level"])
    return dataclasses.replace(config, **changes) if changes else config


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint.

    Args:
        argv: Command-line arguments. Defaults to ``sys.argv[1:]``.

    Returns:
        Exit code: 0 for success (or any run with ignore-errors), 1 for failure.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = _resolve_config(args)
    except Exception as exc:
        logging.basicConfig(level=logging.ERROR, stream=sys.stderr)
        logging.getLogger(__name__).error("Invalid configuration: %s", exc)
        return 1

    logging.basicConfig(
        level=getattr(logging, config.log_level.value),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        pipeline = ResolutionPipeline(
            build_providers(config),
            retry_config=config.retry_config(),
            timeout_seconds=config.timeout_seconds,
        )
    except ValueError as exc:
        logging.getLogger(__name__).error("Invalid configuration: %s", exc)
        return 1

    runner = SecretsStreamRunner(pipeline, ignore_errors=config.ignore_errors)
    result = runner.run(sys.stdin, sys.stdout)
    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
