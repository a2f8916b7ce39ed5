"""
Main CLI entry point for sciter-typings.
"""

# Standard library imports
import asyncio
from collections.abc import Sequence
from pathlib import Path

# Third-party imports
import typer

# Local imports
import sciter_typings
from sciter_typings.environment import ConfigurationError, get_settings
from sciter_typings.sync import Scope
from sciter_typings.typings import MODULES_DIR_NAME
from sciter_typings.utils.rich_console import configure_logging, get_console, print_panel, print_table
from sciter_typings.workspace import (
    NoDestinationSelected,
    NoWritableFiles,
    build_synchronizer,
    initialize_scope,
    scopes_from_paths,
    update_all_scopes,
)

console = get_console()

app = typer.Typer(
    help="sciter-typings - keep Sciter .d.ts declaration files in your workspace up to date.",
    no_args_is_help=True,
)

FoldersArgument = typer.Argument(None, help="Workspace folders (defaults to the current directory)")


@app.callback()
def main():
    """
    sciter-typings - Sciter IntelliSense typings manager
    """
    try:
        configure_logging(get_settings())
    except ConfigurationError as error:
        console.print(f"[bold red]Error:[/] {error}")
        raise typer.Exit(1)


def _scopes(folders: list[Path] | None) -> list[Scope]:
    return scopes_from_paths(folders or [Path.cwd()])


def prompt_for_scope(candidates: Sequence[Scope]) -> Scope | None:
    """Let the user pick one of several folders by number."""
    rows = [[str(index + 1), scope.name, str(scope.root)] for index, scope in enumerate(candidates)]
    print_table(["#", "Folder", "Path"], rows, title="Workspace Folders")
    choice = typer.prompt(
        f'Select a workspace folder to initialize Sciter IntelliSense (creates "{MODULES_DIR_NAME}" there)'
    )
    if choice.isdigit() and 1 <= int(choice) <= len(candidates):
        return candidates[int(choice) - 1]
    return None


@app.command()
def init(folders: list[Path] | None = FoldersArgument):
    """Download the typings into one workspace folder and create jsconfig.json."""
    synchronizer = build_synchronizer()
    try:
        result = asyncio.run(initialize_scope(synchronizer, _scopes(folders), prompt_for_scope))
    except NoDestinationSelected as warning:
        console.print(f"[bold yellow]Warning:[/] {warning}")
        return
    except (NoWritableFiles, OSError) as error:
        console.print(f"[bold red]Initialize failed:[/] {error}")
        raise typer.Exit(1)
    finally:
        synchronizer.fetcher.close()

    print_panel(
        f'IntelliSense initialized. {result.written_count} declaration files stored in "{MODULES_DIR_NAME}" '
        f'for "{result.scope.name}".',
        title="sciter-typings",
        style="bold green",
    )


@app.command()
def update(folders: list[Path] | None = FoldersArgument):
    """Delete and re-download the typings in every given folder."""
    scopes = _scopes(folders)
    if not scopes:
        return

    synchronizer = build_synchronizer()
    try:
        report = asyncio.run(update_all_scopes(synchronizer, scopes))
    finally:
        synchronizer.fetcher.close()

    rows = [
        [result.scope.name, result.written_count, len(result.recovered), len(result.skipped)]
        for result in report.results
    ]
    rows += [[name, "-", "-", f"error: {detail}"] for name, detail in report.failed.items()]
    print_table(["Folder", "Written", "From bundle", "Skipped"], rows, title="Typings Update")
    if report.empty_scopes:
        console.print(f"[bold yellow]Warning:[/] no typings written for {', '.join(report.empty_scopes)}")
    console.print(f"IntelliSense update completed ({MODULES_DIR_NAME} refreshed).")


@app.command()
def status(folder: Path = typer.Argument(Path("."), help="Workspace folder to inspect")):
    """Show which typings are on disk and which have a stored ETag."""
    scope = Scope(root=folder)
    synchronizer = build_synchronizer()
    try:
        rows = [
            [entry.file_name, "yes" if entry.on_disk else "no", entry.etag or "(none)"]
            for entry in synchronizer.describe_scope(scope)
        ]
    finally:
        synchronizer.fetcher.close()
    print_table(["File", "On disk", "ETag"], rows, title=f"Typings in {scope.name}")


@app.command()
def version():
    """Show the sciter-typings version."""
    typer.echo(f"sciter-typings version: {sciter_typings.__version__}")


if __name__ == "__main__":
    app()
