# cli.py - Command line interface for Snarf
"""
Snarf CLI - Autolab assignments from the terminal

COMMANDS:
    Assignments:
        snarf list [--json]                      List assignments with grades
        snarf search QUERY                       Find assignments by name, grade or status

    Working on an assignment:
        snarf download NAME [--open]             Download and unpack starter code
        snarf headers NAME                       Fill in Java header placeholders
        snarf open [NAME]                        Open an assignment folder (or the workspace)
        snarf writeup NAME                       Open the assignment writeup in a browser

    Handing in:
        snarf submit NAME [--no-wait]            Zip, upload, and wait for feedback
        snarf feedback NAME [--output FILE]      Wait for and show feedback

    Other:
        snarf config init                        Write a snarf.yaml template
        snarf config show                        Show resolved settings
        snarf version                            Show version information

EXAMPLES:
    # See what's due
    snarf list

    # Grab starter code and open it
    snarf download HW3 --open

    # Hand in and save the feedback report
    snarf submit HW3 --output HW3-feedback.md
"""

import json
import sys
from pathlib import Path
from typing import Optional

import click

from snarf import __version__
from snarf import icons as icon_module
from snarf.assignments import fetch_assignments, find_assignment, search_assignments
from snarf.client import AutolabClient
from snarf.config_utils import (
    SnarfConfig,
    create_config_template,
    get_config,
)
from snarf.download import download_assignment
from snarf.errors import SnarfError
from snarf.feedback import poll_feedback
from snarf.headers import apply_headers
from snarf.log_utils import setup_logging
from snarf.models import Assignment
from snarf.security_utils import assignment_dir, mask_sensitive
from snarf.submit import submit_assignment


# ============================================================================
# Context & Utilities
# ============================================================================

class SnarfContext:
    """Shared context for CLI commands"""

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = config_dir or Path.cwd()

    def config(self) -> SnarfConfig:
        """Resolve settings fresh for every command"""
        return get_config(self.config_dir)

    def lookup(self, name: str, config: SnarfConfig, client: AutolabClient) -> Assignment:
        """Find an assignment by name on the live assessments page"""
        assignments = fetch_assignments(config, client)
        assignment = find_assignment(assignments, name)
        if assignment is None:
            raise click.ClickException(f"No assignment named '{name}'. Run: snarf list")
        return assignment


def _icons():
    return icon_module.icons


def _fail(error: SnarfError):
    click.echo(str(error), err=True)
    sys.exit(1)


def _print_assignment(assignment: Assignment):
    icon = icon_module.downloaded_icon(assignment.is_downloaded)
    click.echo(f"  {icon} {assignment.name:<28} {assignment.description}")


def _emit_report(report: str, output: Optional[str]):
    if output:
        Path(output).write_text(report, encoding="utf-8")
        click.echo(f"{_icons().SUCCESS} Feedback written to {output}")
    else:
        click.echo(icon_module.fence("Feedback"))
        click.echo(report)


# ============================================================================
# Click Group Setup
# ============================================================================

@click.group()
@click.option('-v', '--verbose', count=True, help='Show progress (-v) or debug output (-vv)')
@click.option('--ascii', 'ascii_icons', is_flag=True, help='Use ASCII icons instead of emoji')
@click.pass_context
def cli(ctx, verbose: int, ascii_icons: bool):
    """
    Snarf - Autolab assignments from the terminal

    Download starter code, hand in work, and read autograder feedback
    without leaving your editor's terminal.
    """
    if ascii_icons:
        icon_module.use_ascii_icons()
    setup_logging(verbose)
    ctx.obj = SnarfContext()


# ============================================================================
# Assignments
# ============================================================================

@cli.command('list')
@click.option('--json', 'as_json', is_flag=True, help='Output as JSON')
@click.pass_obj
def list_assignments(ctx: SnarfContext, as_json: bool):
    """
    List course assignments

    Examples:
        snarf list            # Table with grades and download status
        snarf list --json     # Machine-readable output
    """
    try:
        assignments = fetch_assignments(ctx.config())
    except SnarfError as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps([a.to_dict() for a in assignments], indent=2))
        return

    if not assignments:
        click.echo("No assignments found.")
        return

    click.echo(f"\nASSIGNMENTS ({len(assignments)}):")
    for assignment in assignments:
        _print_assignment(assignment)


@cli.command()
@click.argument('query')
@click.pass_obj
def search(ctx: SnarfContext, query: str):
    """
    Search assignments by name, grade, due date or download status

    Examples:
        snarf search hw
        snarf search "not downloaded"
    """
    try:
        assignments = fetch_assignments(ctx.config())
    except SnarfError as e:
        _fail(e)

    if not assignments:
        click.echo("No assignments to search.")
        return

    matches = search_assignments(assignments, query)
    if not matches:
        click.echo(f"{_icons().SEARCH} No assignments match '{query}'")
        return

    for assignment in matches:
        _print_assignment(assignment)
        click.echo(f"     {assignment.detail}")


# ============================================================================
# Working on an assignment
# ============================================================================

@cli.command()
@click.argument('name')
@click.option('--open', 'open_after', is_flag=True, help='Open the folder when done')
@click.pass_obj
def download(ctx: SnarfContext, name: str, open_after: bool):
    """
    Download and unpack an assignment's starter code

    Java header placeholders are filled in from your settings.

    Examples:
        snarf download HW3
        snarf download HW3 --open
    """
    try:
        config = ctx.config()
        client = AutolabClient(config)
        assignment = ctx.lookup(name, config, client)
        click.echo(f"{_icons().DOWNLOAD} Downloading {assignment.name}...")
        dest_dir = download_assignment(assignment, config, client)
    except SnarfError as e:
        _fail(e)

    click.echo(f"{_icons().SUCCESS} Downloaded {assignment.name} to {dest_dir}")
    if open_after:
        click.launch(str(dest_dir))


@cli.command()
@click.argument('name')
@click.pass_obj
def headers(ctx: SnarfContext, name: str):
    """
    Fill in Java header placeholders for a downloaded assignment

    Replaces "TODO Your Name", "TODO Date", "TODO Your Period" and
    "TODO list collaborators" in every .java file.
    """
    try:
        config = ctx.config()
        folder = assignment_dir(config.workspace_path, name)
        if not folder.is_dir():
            click.echo(f"{_icons().ERROR} Assignment folder not found at {folder}", err=True)
            sys.exit(1)
        changed = apply_headers(folder, config.preferences)
    except SnarfError as e:
        _fail(e)

    if changed:
        for path in changed:
            click.echo(f"  {_icons().EDIT} {path.relative_to(folder)}")
        click.echo(f"{_icons().SUCCESS} Java headers updated!")
    else:
        click.echo("No placeholders left to fill in.")


@cli.command('open')
@click.argument('name', required=False)
@click.pass_obj
def open_folder(ctx: SnarfContext, name: Optional[str]):
    """
    Open an assignment folder, or the workspace root without NAME
    """
    try:
        config = ctx.config()
        target = assignment_dir(config.workspace_path, name) if name else config.workspace_path
    except SnarfError as e:
        _fail(e)

    if not target.exists():
        click.echo(f"{_icons().ERROR} Folder not found: {target}", err=True)
        sys.exit(1)
    click.echo(f"{_icons().FOLDER} {target}")
    click.launch(str(target))


@cli.command()
@click.argument('name')
@click.pass_obj
def writeup(ctx: SnarfContext, name: str):
    """
    Open an assignment's writeup in the browser
    """
    try:
        config = ctx.config()
        assignment = ctx.lookup(name, config, AutolabClient(config))
    except SnarfError as e:
        _fail(e)

    click.echo(f"{_icons().LINK} {assignment.writeup_url}")
    click.launch(assignment.writeup_url)


# ============================================================================
# Handing in
# ============================================================================

@cli.command()
@click.argument('name')
@click.option('--no-wait', is_flag=True, help='Do not wait for autograder feedback')
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Write the feedback report to FILE')
@click.pass_obj
def submit(ctx: SnarfContext, name: str, no_wait: bool, output: Optional[str]):
    """
    Zip and hand in an assignment, then wait for feedback

    Examples:
        snarf submit HW3
        snarf submit HW3 --no-wait
        snarf submit HW3 --output HW3-feedback.md
    """
    try:
        config = ctx.config()
        client = AutolabClient(config)
        assignment = Assignment(
            name=name,
            due_date="",
            writeup_url=client.assessment_url(name),
            download_url=client.download_url(name),
        )
        click.echo(f"{_icons().UPLOAD} Zipping and uploading {name}...")
        submit_assignment(assignment, config, client)
        click.echo(f"{_icons().SUCCESS} Submitted {name}")

        if no_wait:
            return

        click.echo(f"{_icons().WORKING} Waiting for grading...")
        report = poll_feedback(
            name,
            progress=lambda msg: click.echo(f"  {_icons().WAITING} {msg}"),
            config=config,
            client=client,
        )
    except SnarfError as e:
        _fail(e)

    _emit_report(report, output)


@cli.command()
@click.argument('name')
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Write the feedback report to FILE')
@click.pass_obj
def feedback(ctx: SnarfContext, name: str, output: Optional[str]):
    """
    Show autograder feedback for the latest submission

    Waits while the submission is still queued or being graded.
    """
    try:
        config = ctx.config()
        click.echo(f"{_icons().WORKING} Fetching feedback for {name}...")
        report = poll_feedback(
            name,
            progress=lambda msg: click.echo(f"  {_icons().WAITING} {msg}"),
            config=config,
        )
    except SnarfError as e:
        _fail(e)

    _emit_report(report, output)


# ============================================================================
# Configuration
# ============================================================================

@cli.group('config')
def config_group():
    """Create or inspect snarf.yaml settings"""


@config_group.command('init')
@click.option('--force', is_flag=True, help='Overwrite an existing snarf.yaml')
@click.pass_obj
def config_init(ctx: SnarfContext, force: bool):
    """Write a commented snarf.yaml in the current directory"""
    path = ctx.config_dir / "snarf.yaml"
    if path.exists() and not force:
        click.echo(f"{_icons().ERROR} {path} already exists (use --force to overwrite)", err=True)
        sys.exit(1)
    path.write_text(create_config_template(), encoding="utf-8")
    click.echo(f"{_icons().SUCCESS} Wrote {path}")


@config_group.command('show')
@click.pass_obj
def config_show(ctx: SnarfContext):
    """Show resolved settings and where they came from"""
    try:
        config = ctx.config()
    except SnarfError as e:
        _fail(e)

    rows = [
        ("workspace_path", str(config.workspace_path)),
        ("session_cookie", mask_sensitive(config.session_cookie) if config.session_cookie else "(not set)"),
        ("author_name", config.author_name or "(not set)"),
        ("period", config.period or "(not set)"),
        ("collaborators", config.collaborators or "(not set)"),
        ("base_url", config.base_url),
        ("course", config.course),
        ("poll_attempts", str(config.poll_attempts)),
        ("poll_delay", str(config.poll_delay)),
    ]
    for key, value in rows:
        source = config._sources.get(key, "default")
        click.echo(f"  {key:<16} {value}  [{source}]")


# ============================================================================
# Version
# ============================================================================

@cli.command()
def version():
    """Show Snarf version"""
    click.echo(f"Snarf CLI v{__version__}")
    click.echo("Autolab assignment workflow from the command line")


# ============================================================================
# Entry Point
# ============================================================================

if __name__ == '__main__':
    cli()
