"""Main entry point for the ccfeed service."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Optional, Tuple

from ccfeed.clients import ConcourseAuthClient, ConcoursePipelineClient, UpstreamError
from ccfeed.config.environment import EnvironmentConfig
from ccfeed.config.exceptions import ConfigurationError
from ccfeed.config.loader import load_config
from ccfeed.config.models import AppConfig
from ccfeed.feed.assembler import Credentials, FeedAssembler
from ccfeed.logging import get_logger
from ccfeed.logging.config import configure_logging
from ccfeed.rendering import FeedRenderer
from ccfeed.web import create_app

logger = get_logger(__name__, component="cli")

FEEDS = ("cc.xml", "job-stats")


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and resolve overrides.

    Log level priority: CLI > LOG_LEVEL > config file.
    Port priority: PORT > config file.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level or "INFO"

    if env_config.port:
        app_config.server.port = env_config.port

    return app_config, env_config


def build_assembler(app_config: AppConfig, env_config: EnvironmentConfig) -> FeedAssembler:
    """Wire Concourse clients and credentials into a FeedAssembler."""
    advanced = app_config.advanced
    client_kwargs = {
        "api_url": app_config.concourse.url,
        "timeout": advanced.http_request_timeout,
        "user_agent": advanced.user_agent,
    }
    return FeedAssembler(
        auth_client=ConcourseAuthClient(**client_kwargs),
        pipeline_client=ConcoursePipelineClient(**client_kwargs),
        credentials=Credentials(env_config.concourse_username, env_config.concourse_password),
        max_parallel_fetches=advanced.max_parallel_fetches,
    )


def render_once(assembler: FeedAssembler, feed: str, base_uri: str) -> str:
    """Build one feed and return its serialized document."""
    renderer = FeedRenderer()
    if feed == "cc.xml":
        return renderer.render_cctray(assembler.build_feed(base_uri))
    return json.dumps(renderer.render_stats(assembler.build_stats(base_uri)), indent=2)


def main(argv: Optional[list] = None) -> int:
    """
    Run the service, or print a single feed with ``--once``.

    Returns:
        Exit code (0 for success, 1 for configuration or upstream failure).
    """
    parser = argparse.ArgumentParser(
        description="Concourse CCTray feed - CI build status as CCTray XML and JSON job stats"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml or config/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    parser.add_argument(
        "--once",
        choices=FEEDS,
        default=None,
        help="Print one feed to stdout and exit instead of serving HTTP",
    )
    args = parser.parse_args(argv)

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)
    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return 1

    environment = os.environ.get("ENVIRONMENT", "local")
    configure_logging(
        level=env_config.log_level,
        format_type=app_config.logging.format,
        environment=environment,
    )

    assembler = build_assembler(app_config, env_config)
    base_uri = app_config.concourse.url

    if args.once:
        try:
            print(render_once(assembler, args.once, base_uri))
        except UpstreamError as e:
            logger.error(
                f"Failed to build {args.once}: {e}",
                extra={"event": "service.once.failed", "error_type": type(e).__name__},
            )
            print(f"Upstream Error: {e}", file=sys.stderr)
            return 1
        return 0

    app = create_app(assembler, base_uri)
    logger.info(
        "ccfeed starting",
        extra={
            "event": "service.starting",
            "concourse_url": base_uri,
            "host": app_config.server.host,
            "port": app_config.server.port,
            "log_level": env_config.log_level,
        },
    )
    app.run(host=app_config.server.host, port=app_config.server.port, threaded=True)

    logger.info("ccfeed stopped", extra={"event": "service.stopping"})
    return 0


if __name__ == "__main__":
    sys.exit(main())
