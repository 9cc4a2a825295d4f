"""
Command line entry point.
"""

from pathlib import Path
import asyncio
import logging
import os
import sys

import click
import yaml

from .config import load_config
from .errors import CleanupError
from .interactive import InteractiveMode
from .reporter import Reporter
from .scanner.index import Confidence
from .scanner.orchestrator import Scanner

logger = logging.getLogger("action_cleanup.cli")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str):
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )


@click.command()
@click.version_option(package_name="action-cleanup")
@click.option("--non-interactive", is_flag=True, help="Run in non-interactive mode")
@click.option("--dry-run", is_flag=True, help="Show what would be deleted without actually deleting")
@click.option("--output", "output", type=click.Path(dir_okay=False), help="Output results to a JSON (or .html) file")
@click.option(
    "--project-root",
    type=click.Path(file_okay=False),
    default=lambda: os.getcwd(),
    show_default="current directory",
    help="Specify project root directory",
)
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="Path to a config.yaml")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override the configured log level",
)
def main(non_interactive, dry_run, output, project_root, config_path, log_level) -> None:
    """Find and clean up unreferenced server actions, dead routes and empty folders."""
    click.echo(click.style("Server Action Cleanup Tool", fg="blue", bold=True))

    try:
        config = load_config(config_path)
    except (OSError, TypeError, ValueError, yaml.YAMLError) as e:
        click.echo(f"{click.style('Error:', fg='red')} invalid configuration: {e}", err=True)
        sys.exit(1)

    configure_logging(log_level or config.log_level)

    root = Path(project_root).resolve()
    scanner = Scanner(root, config.scan)
    try:
        click.echo(click.style("Scanning project for server actions and references...", fg="bright_black"))
        result = asyncio.run(scanner.scan())
    except (CleanupError, OSError) as e:
        logger.debug("Scan failed", exc_info=True)
        click.echo(f"{click.style('Error:', fg='red')} {e}", err=True)
        sys.exit(1)

    if not non_interactive:
        InteractiveMode(result, root, config, dry_run=dry_run, scanner=scanner).start()
        return

    reporter = Reporter(result)
    if output:
        reporter.save(output)
        click.echo(click.style(f"Results saved to {output}", fg="green"))
    else:
        reporter.print_summary()

    if dry_run:
        unused = result.with_confidence(Confidence.SAFE_TO_DELETE)
        click.echo("")
        click.echo(click.style(f"Dry run: {len(unused)} actions would be deleted", fg="blue"))
        for action in unused:
            click.echo(f"  {action.file_path}")


if __name__ == "__main__":
    main()
