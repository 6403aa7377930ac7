"""deployfeed CLI - report which environments a release will reach."""

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from deployfeed import __version__
from deployfeed.config import DEFAULT_BASE_BRANCH, build_run_config
from deployfeed.ecs import DEFAULT_REGION
from deployfeed.errors import DeployFeedError, UnknownEnvironmentError
from deployfeed.gate import evaluate
from deployfeed.pipeline import run_report
from deployfeed.policy import POLICY_TABLE, Environment
from deployfeed.types import EnvironmentCredentials

cli = typer.Typer(
    name="deployfeed",
    help="deployfeed - Continuous Deployment status reporter",
    no_args_is_help=True,
)
console = Console()


def _version_option_callback(value: bool) -> None:
    """Handle eager --version option."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@cli.callback()
def _cli_callback(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show deployfeed version and exit.",
        is_eager=True,
        callback=_version_option_callback,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging.",
    ),
) -> None:
    """Evaluate promotion gates and publish a deployment summary."""
    _configure_logging(verbose)


def _input(name: str) -> str:
    # GitHub Actions exposes `with:` inputs as INPUT_<NAME>.
    return f"INPUT_{name.upper()}"


@cli.command()
def report(
    release_version: str = typer.Option(
        "",
        "--release-version",
        envvar=_input("releaseVersion"),
        help="Release version being published (e.g. 2.4.2)",
    ),
    repository: str = typer.Option(
        "",
        "--repository",
        envvar=_input("repository"),
        help="Repository in owner/repo form",
    ),
    cluster_name: str = typer.Option(
        "",
        "--cluster-name",
        envvar=_input("clusterName"),
        help="Cluster name; prefixed with <env>- per environment",
    ),
    service_name: str = typer.Option(
        "",
        "--service-name",
        envvar=_input("serviceName"),
        help="Service name; prefixed with <env>- per environment",
    ),
    dev_ecs_key: str = typer.Option("", "--dev-ecs-key", envvar=_input("devEcsKey"), show_default=False),
    dev_ecs_secret: str = typer.Option("", "--dev-ecs-secret", envvar=_input("devEcsSecret"), show_default=False),
    sandbox_ecs_key: str = typer.Option("", "--sandbox-ecs-key", envvar=_input("sandboxEcsKey"), show_default=False),
    sandbox_ecs_secret: str = typer.Option(
        "", "--sandbox-ecs-secret", envvar=_input("sandboxEcsSecret"), show_default=False
    ),
    production_ecs_key: str = typer.Option(
        "", "--production-ecs-key", envvar=_input("productionEcsKey"), show_default=False
    ),
    production_ecs_secret: str = typer.Option(
        "", "--production-ecs-secret", envvar=_input("productionEcsSecret"), show_default=False
    ),
    token: str = typer.Option(
        "",
        "--token",
        envvar=_input("token"),
        help="GitHub token used to comment on pull requests",
        show_default=False,
    ),
    sha: str = typer.Option(
        "",
        "--sha",
        envvar=_input("sha"),
        help="Commit whose open pull requests receive the summary",
    ),
    region: str = typer.Option(DEFAULT_REGION, "--region", envvar=_input("region")),
    base_branch: str = typer.Option(DEFAULT_BASE_BRANCH, "--base-branch", envvar=_input("baseBranch")),
    config_file: Path | None = typer.Option(
        None,
        "--config",
        help="YAML file with per-environment credentials",
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        help="File receiving the images output (default $GITHUB_OUTPUT)",
    ),
) -> None:
    """Report which environments will pick up a release."""
    try:
        config = build_run_config(
            release_version=release_version,
            repository=repository,
            cluster_name=cluster_name,
            service_name=service_name,
            credentials={
                Environment.DEV: EnvironmentCredentials(dev_ecs_key, dev_ecs_secret),
                Environment.SANDBOX: EnvironmentCredentials(sandbox_ecs_key, sandbox_ecs_secret),
                Environment.PRODUCTION: EnvironmentCredentials(production_ecs_key, production_ecs_secret),
            },
            config_file=config_file,
            token=token,
            sha=sha,
            region=region,
            base_branch=base_branch,
        )
        console.print(f"[cyan]Evaluating release[/cyan] v{config.release_version}")
        result = asyncio.run(run_report(config, output_path=output, output_stream=console.file))
    except DeployFeedError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1) from e

    typer.echo(result.body)
    updated = sum(1 for entry in result.report.results if entry.will_be_replaced)
    console.print(f"[cyan]{updated}/{len(result.report.results)} environment(s) will be updated[/cyan]")
    if result.report.failures:
        failed = ", ".join(entry.environment.value for entry in result.report.failures)
        console.print(f"[yellow]⚠ {len(result.report.failures)} environment(s) could not be checked: {failed}[/yellow]")
    if result.pull_requests:
        console.print(
            f"[green]✓ Commented on {result.comments_posted}/{len(result.pull_requests)} pull request(s)[/green]"
        )


@cli.command()
def gate(
    environment: str = typer.Argument(..., help="Environment name (dev, sandbox, production)"),
    current_tag: str = typer.Argument(..., help="Tag currently deployed"),
    release_version: str = typer.Argument(..., help="Candidate release version"),
) -> None:
    """Evaluate a single environment gate offline.

    Exits 0 when the release would replace the current tag, 2 otherwise.
    """
    try:
        result = evaluate(environment, current_tag, release_version)
    except UnknownEnvironmentError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1) from e

    if result.will_be_replaced:
        console.print(f"[green]✓ {environment} will be updated from {current_tag} to {release_version}[/green]")
        raise typer.Exit(0)
    console.print(f"[red]✗ {environment} will stay on {current_tag}[/red]")
    raise typer.Exit(2)


@cli.command()
def policies() -> None:
    """Show the promotion policy for each environment."""
    table = Table(title="Promotion policies")
    table.add_column("environment")
    table.add_column("comparator")
    for environment in POLICY_TABLE:
        table.add_row(environment.value, environment.comparator)
    console.print(table)


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
