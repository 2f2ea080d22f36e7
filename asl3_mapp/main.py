"""
ASL3 M-Apps installer — CLI entrypoint.

Usage:
    sudo asl3-mapp -a -d -s -w -y -i -m
    sudo python -m asl3_mapp.main --help
"""

from __future__ import annotations

import logging
import os
import sys

import click

from asl3_mapp import __version__
from asl3_mapp.core.config.settings import InstallerSettings
from asl3_mapp.core.errors import InstallerError, PrivilegeError
from asl3_mapp.core.observability.logging_config import setup_logging
from asl3_mapp.core.steps.registry import STEP_ORDER

logger = logging.getLogger(__name__)

EXIT_INTERRUPTED = 130


def _param(step_name: str) -> str:
    return step_name.replace("-", "_")


def _step_options(func):
    """One independent flag per step, listed in execution order."""
    for step in reversed(STEP_ORDER):
        func = click.option(step.flag, _param(step.name), is_flag=True, help=step.description)(func)
    return func


@click.command(
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog="You can combine options (e.g. asl3-mapp -a -d -s -w -y -i -m).",
)
@_step_options
@click.option(
    "--node-number",
    default=None,
    metavar="N",
    help="AllStar node number for -i / -m (prompted for when omitted).",
)
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.version_option(version=__version__, prog_name="asl3-mapp")
@click.pass_context
def cli(
    ctx: click.Context,
    node_number: str | None,
    debug: bool,
    **flags: bool,
) -> None:
    """Install AllStarLink 3 add-on applications.

    Must be run with sudo from a normal user session.
    """
    steps = [step.name for step in STEP_ORDER if flags.get(_param(step.name))]
    if not steps:
        click.echo(ctx.get_help())
        ctx.exit(1)

    settings = InstallerSettings.from_env()
    level = "DEBUG" if debug else settings.log_level

    # Console only until we know we may write the durable log.
    setup_logging(level=level, quiet_third_party=not debug)

    from asl3_mapp.core.privilege import validate

    try:
        context = validate()
    except PrivilegeError as e:
        if os.geteuid() == 0:
            # A root login may still write the durable log.
            setup_logging(level=level, log_file=settings.log_file, quiet_third_party=not debug)
        logger.error("%s", e)
        sys.exit(1)

    setup_logging(level=level, log_file=settings.log_file, quiet_third_party=not debug)

    from asl3_mapp.adapters.network.download import Downloader
    from asl3_mapp.adapters.shell.command import CommandRunner
    from asl3_mapp.core.steps.node import NodeNumberSource
    from asl3_mapp.core.use_cases.install import run_install

    try:
        result = run_install(
            steps,
            context,
            runner=CommandRunner(),
            fetcher=Downloader(settings.download),
            settings=settings,
            node_number=NodeNumberSource(node_number, interactive=context.interactive),
        )
    except (KeyboardInterrupt, click.Abort):
        logger.error("Interrupted.")
        sys.exit(EXIT_INTERRUPTED)
    except InstallerError as e:
        logger.error("%s", e)
        sys.exit(1)
    except Exception as e:
        logger.exception("Installation aborted: %s", e)
        sys.exit(1)

    sys.exit(result.exit_code)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
