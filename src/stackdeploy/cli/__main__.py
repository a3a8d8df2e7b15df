#!/usr/bin/env python3
"""Main CLI entry point for stack deployments."""

import logging
import sys
from typing import Optional

import click

from .. import __version__
from ..cloudformation import StackManager
from ..config import create_session, load_config
from ..deployment import DeploymentRunner, StackDispatcher
from ..errors import ConfigError, InventoryScanError, OperationError, StackDeployError
from ..reporting import ConsoleReporter


@click.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(),
    help="Configuration file or directory (defaults to ./conf.yaml|yml|json)",
)
@click.option("--profile", help="AWS profile to use (overrides awsprofile)")
@click.option("--region", "-r", help="AWS region (overrides region)")
@click.option(
    "--timeout",
    type=click.IntRange(min=1),
    help="Seconds to wait for each stack operation",
)
@click.option(
    "--strict", is_flag=True, help="Exit non-zero if any stack was skipped"
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.version_option(version=__version__)
def main(
    config_path: Optional[str],
    profile: Optional[str],
    region: Optional[str],
    timeout: Optional[int],
    strict: bool,
    verbose: bool,
) -> None:
    """Create or update every CloudFormation stack listed in the configuration."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    reporter = ConsoleReporter()

    try:
        reporter.info("Loading deployment configuration")
        config = load_config(config_path)
        if profile:
            config.aws_profile = profile
        if region:
            config.aws_region = region
        if timeout:
            config.timeout = timeout

        reporter.info("Initializing AWS environment")
        session = create_session(config)

        dispatcher = StackDispatcher(
            StackManager(session=session),
            timeout=config.timeout,
            reporter=reporter,
        )
        runner = DeploymentRunner(dispatcher, reporter=reporter)

        reporter.info("Deploying")
        runner.run(config.stacks)

    except (OperationError, InventoryScanError):
        # Already reported by the runner
        sys.exit(1)
    except ConfigError as e:
        reporter.error(f"Configuration error: {e}")
        sys.exit(1)
    except StackDeployError as e:
        reporter.error(str(e))
        sys.exit(1)

    reporter.info(
        f"{len(runner.deployed)} stack(s) deployed, {len(runner.skipped)} skipped"
    )
    if runner.skipped and strict:
        reporter.error(f"Skipped stacks: {', '.join(runner.skipped)}")
        sys.exit(1)


if __name__ == "__main__":
    main()
