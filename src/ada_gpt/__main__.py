"""Entry point for running AdaGPT.

This module provides the main entry point for a single run, typically
one GitHub Actions job per webhook delivery. It handles:
- Configuration loading (YAML file or action inputs)
- Logging setup with secret sanitization
- Reading the triggering event
- Mapping failures to the process exit code
"""

import argparse
import asyncio
import sys
from pathlib import Path

import structlog

from ada_gpt._version import __version__
from ada_gpt.utils.errors import (
    AdaGPTError,
    ConfigurationError,
    IncompleteCompletion,
    PlatformError,
    RateLimited,
)

log = structlog.get_logger()


def setup_logging(debug: bool = False, log_format: str = "console") -> None:
    """Configure structured logging with secret sanitization.

    Args:
        debug: Enable debug logging if True
        log_format: Output format ("json" or "console")
    """
    from ada_gpt.utils.logging import LogFormat, LogLevel, configure_logging

    level = LogLevel.DEBUG if debug else LogLevel.INFO
    configure_logging(level=level, log_format=LogFormat(log_format.lower()))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed argument namespace
    """
    parser = argparse.ArgumentParser(
        prog="ada-gpt",
        description="AdaGPT - answers GitHub issues and pull requests when mentioned",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to a YAML configuration file (default: read GitHub Actions inputs)",
    )

    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Load configuration and the event, then exit without replying",
    )

    parser.add_argument(
        "--format",
        choices=["json", "console"],
        default="console",
        help="Log output format (default: console)",
    )

    return parser.parse_args(argv)


async def run_bot(config_path: Path | None, dry_run: bool = False, debug: bool = False) -> int:
    """Run AdaGPT once for the current event.

    Args:
        config_path: YAML configuration file, or None to use action inputs
        dry_run: If True, only validate config and event
        debug: Keep debug logging regardless of the configured level

    Returns:
        Exit code (0 for success or skip, non-zero for error)
    """
    log.info("starting_ada_gpt", version=__version__)

    try:
        from ada_gpt.adapters.vcs.github import load_github_event
        from ada_gpt.config.loader import load_config, load_config_from_action_env
        from ada_gpt.utils.logging import configure_logging
        from ada_gpt.utils.security import mask_secret

        if config_path is not None:
            log.info("loading_configuration", path=str(config_path))
            try:
                config = load_config(config_path)
            except ValueError as e:
                # Unset ${VAR} references in the YAML file
                raise ConfigurationError(str(e)) from e
            configure_logging(
                level="DEBUG" if debug else config.logging.level,
                log_format=config.logging.format,
            )
        else:
            log.info("loading_action_inputs")
            config = load_config_from_action_env()
        log.info(
            "configuration_loaded",
            repository=config.github.repository,
            provider=config.llm.provider,
            github_token=mask_secret(config.github.token),
        )

        event = load_github_event()
        log.info("event_loaded", event_kind=event.kind)

        if dry_run:
            log.info("dry_run_mode_config_valid")
            return 0

        from ada_gpt.core.agent import run_event

        result = await run_event(config, event)
        log.info("run_finished", result=result.value)
        return 0

    except FileNotFoundError as e:
        log.error("configuration_file_not_found", path=str(config_path), error=str(e))
        return 1
    except ConfigurationError as e:
        log.error("configuration_invalid", error=str(e))
        return 1
    except RateLimited as e:
        log.error("completion_rate_limited", error=str(e))
        return 1
    except IncompleteCompletion as e:
        log.error("completion_incomplete", stop_reason=e.stop_reason, error=str(e))
        return 1
    except PlatformError as e:
        log.error("platform_request_failed", status=e.status, error=str(e))
        return 1
    except AdaGPTError as e:
        log.error("run_failed", error_type=type(e).__name__, error=str(e))
        return 1
    except Exception as e:
        log.exception("fatal_error", error=str(e))
        return 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    setup_logging(debug=args.debug, log_format=args.format)

    try:
        return asyncio.run(run_bot(args.config, args.dry_run, args.debug))
    except KeyboardInterrupt:
        log.info("interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
