"""CLI application for depaudit."""

import asyncio
from pathlib import Path

import typer
from rich.console import Console

from depaudit.audit import AuditCommand
from depaudit.config import AuditConfig
from depaudit.errors import AuditError
from depaudit.log import configure_logging
from depaudit.presenter import ConsolePrinter

console = Console()

app = typer.Typer(
    name="depaudit",
    help="depaudit - Audit npm dependencies for known vulnerabilities and fix them",
    add_completion=False,
)


@app.command()
def audit(
    subcommand: str | None = typer.Argument(None, help="Optional subcommand: 'fix' applies the recommended remediations"),
    prefix: Path = typer.Option(Path("."), "--prefix", "-C", help="Project root containing package.json"),
    registry: str | None = typer.Option(None, "--registry", help="Registry base URL"),
    global_mode: bool = typer.Option(False, "--global", "-g", help="Audit global packages (unsupported)"),
    timeout: float | None = typer.Option(None, "--timeout", help="Registry request timeout in seconds"),
    loglevel: str | None = typer.Option(None, "--loglevel", help="DEBUG, INFO, NOTICE, WARNING or ERROR"),
) -> None:
    """depaudit - Audit the project lockfile for vulnerabilities, or fix them with 'depaudit fix'."""

    try:
        config = AuditConfig.from_env(
            registry=registry,
            global_mode=global_mode or None,
            timeout=timeout,
            log_level=loglevel,
        )
        configure_logging(config.log_level)

        command = AuditCommand(prefix, config=config, printer=ConsolePrinter(console))
        args = [subcommand] if subcommand else []
        exit_code = asyncio.run(command.run(args))

    except AuditError as e:
        console.print(f"Error [{e.code}]: {e.message}", style="red", markup=False, soft_wrap=True)
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"Error: {e}", style="red", markup=False, soft_wrap=True)
        raise typer.Exit(1)

    raise typer.Exit(exit_code)

if __name__ == "__main__":
    app()
