"""CLI entry point for the JUnit XML importer."""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

import typer

from boostsec.junit_importer.clients.aqua import AquaClient
from boostsec.junit_importer.config import build_config
from boostsec.junit_importer.errors import ConfigurationError
from boostsec.junit_importer.importer import Importer
from boostsec.junit_importer.models.config import ImporterConfig, MappingStrategy
from boostsec.junit_importer.models.summary import ExitCode, RunSummary
from boostsec.junit_importer.redaction import RedactingFilter

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)

app = typer.Typer()


def configure_logging(level: str) -> None:
    """Configure root logging to stderr with secret redaction."""
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO

    logging.basicConfig(
        level=resolved,
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,  # Force reconfiguration even if already set up
    )
    for handler in logging.getLogger().handlers:
        handler.addFilter(RedactingFilter())


@app.command()
def main(  # noqa: PLR0913
    config_file: Path | None = typer.Option(  # noqa: B008
        None, "--config", "-c", help="YAML or JSON configuration file"
    ),
    inputs: list[str] | None = typer.Option(  # noqa: B008
        None, "--input", "-i", help="Report file or directory (repeatable)"
    ),
    search_pattern: str | None = typer.Option(
        None, help="File name pattern when scanning directories (default: *.xml)"
    ),
    recursive: bool | None = typer.Option(
        None, "--recursive/--no-recursive", help="Recurse into subdirectories"
    ),
    stdin: bool | None = typer.Option(
        None, "--stdin", help="Read a report from stdin when no input is given"
    ),
    aqua_url: str | None = typer.Option(
        None, envvar="AQUA_URL", help="aqua base URL (HTTPS)"
    ),
    username: str | None = typer.Option(
        None, envvar="AQUA_USERNAME", help="aqua username"
    ),
    password: str | None = typer.Option(
        None, envvar="AQUA_PASSWORD", help="aqua password"
    ),
    project: int | None = typer.Option(
        None, envvar="AQUA_PROJECT_ID", help="aqua project ID"
    ),
    strategy: MappingStrategy | None = typer.Option(
        None, help="Test case ID resolution strategy"
    ),
    regex: str | None = typer.Option(
        None, help="Custom test case ID pattern for the regex strategy"
    ),
    prefix: str | None = typer.Option(
        None, help="Prefix for the prefix-suffix strategy (default: TC)"
    ),
    digits_length: int | None = typer.Option(
        None, help="Exact digit count for the prefix-suffix strategy"
    ),
    skip_unmapped: bool | None = typer.Option(
        None, "--skip-unmapped/--no-skip-unmapped", help="Skip unmapped test cases"
    ),
    fail_on_unmapped: bool | None = typer.Option(
        None,
        "--fail-on-unmapped",
        help="Abort when a test case cannot be mapped (only with --no-skip-unmapped)",
    ),
    dry_run: bool | None = typer.Option(
        None, "--dry-run", help="Log what would be submitted without network calls"
    ),
    timeout: int | None = typer.Option(None, help="HTTP timeout in seconds"),
    retries: int | None = typer.Option(None, help="Attempts for transient errors"),
    run_name: str | None = typer.Option(
        None, envvar="AQUA_RUN_NAME", help="Friendly name for this run"
    ),
    external_run_id: str | None = typer.Option(
        None, envvar="AQUA_EXTERNAL_RUN_ID", help="CI run identifier"
    ),
    log_level: str | None = typer.Option(None, help="Minimum log level"),
) -> None:
    """Import JUnit XML test results into aqua."""
    overrides: dict[str, dict[str, Any]] = {
        "aqua": {
            "base_url": aqua_url,
            "username": username,
            "password": password,
            "project_id": project,
        },
        "http": {"timeout_seconds": timeout, "retries": retries},
        "mapping": {
            "strategy": strategy.value if strategy else None,
            "pattern": regex,
            "prefix": prefix,
            "digits_length": digits_length,
        },
        "behavior": {
            "skip_unmapped": skip_unmapped,
            "fail_on_unmapped": fail_on_unmapped or None,
            "dry_run": dry_run or None,
        },
        "input": {
            "paths": inputs or None,
            "search_pattern": search_pattern,
            "recursive": recursive,
            "read_from_stdin": stdin or None,
        },
        "run": {"name": run_name, "external_run_id": external_run_id},
        "logging": {"level": log_level},
    }

    try:
        config = build_config(config_file, overrides)
    except ConfigurationError as e:
        configure_logging(log_level or "INFO")
        logger.error(f"Configuration error: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=ExitCode.FATAL)

    configure_logging(config.logging.level)
    logger.info(
        f"Configuration loaded. Aqua base URL: {config.aqua.base_url or '<not set>'}, "
        f"timeout: {config.http.timeout_seconds}s"
    )

    try:
        summary = asyncio.run(_run_import(config))
    except (KeyboardInterrupt, asyncio.CancelledError):
        logger.warning("Import canceled by user.")
        raise typer.Exit(code=ExitCode.SUCCESS)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=ExitCode.FATAL)
    except Exception as e:
        logger.exception("Unhandled error during import")
        typer.echo(f"Error running import: {e}", err=True)
        raise typer.Exit(code=ExitCode.FATAL)

    typer.echo(summary.model_dump_json(indent=2))

    if summary.exit_code != ExitCode.SUCCESS:
        raise typer.Exit(code=int(summary.exit_code))


async def _run_import(config: ImporterConfig) -> RunSummary:
    """Create the submission client and run the importer."""
    client = None
    if not config.behavior.dry_run:
        client = AquaClient(config.aqua, config.http)
    importer = Importer(config, client)
    return await importer.run()


if __name__ == "__main__":  # pragma: no cover
    app()
