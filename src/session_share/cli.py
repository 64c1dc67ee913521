"""CLI entry point for session-share."""

import logging
import os
import sys
from pathlib import Path

import click
import uvicorn

from .backends import get_store
from .core import SessionShareError
from .finder import find_most_recent_session
from .share import import_session, preview_session, share_session


def _resolve_session_path(session_path: str | None) -> Path:
    if session_path:
        return Path(session_path)
    found = find_most_recent_session()
    if found is None:
        raise click.ClickException(
            "No session files found in ~/.claude/projects/. "
            "Please provide a session path with --session-path"
        )
    return found


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """Share Claude Code sessions as sanitized gists, and import them back."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@main.command()
@click.option("--session-path", type=click.Path(dir_okay=False), help="Session file to share (default: most recent).")
def share(session_path: str | None):
    """Sanitize a session and upload it as a secret gist."""
    path = _resolve_session_path(session_path)
    click.echo(f"Uploading session: {path}")
    try:
        published = share_session(path, get_store())
    except SessionShareError as e:
        raise click.ClickException(str(e))

    click.echo("\nSession shared successfully!")
    click.echo(f"\nGist URL: {published.url}")
    click.echo("\nShare this URL to give others access to the conversation.")


@main.command("import")
@click.argument("reference")
@click.option("--project-path", type=click.Path(file_okay=False), help="Project directory (default: current directory).")
def import_(reference: str, project_path: str | None):
    """Import a shared session from a gist URL or id."""
    project_path = os.path.abspath(project_path or os.getcwd())
    click.echo(f"Importing session from: {reference}")
    click.echo(f"Target directory: {project_path}")
    try:
        result = import_session(reference, project_path, get_store())
    except SessionShareError as e:
        raise click.ClickException(str(e))

    click.echo("\nSession imported successfully!")
    click.echo(f"\nSession ID: {result.session_id}")
    click.echo(f"Messages: {result.message_count}")
    if result.skipped_count:
        click.echo(f"Skipped malformed lines: {result.skipped_count}")
    click.echo(f"Location: {result.session_path}")
    click.echo("\nUse 'claude --resume' to see the imported session.")


@main.command()
@click.option("--session-path", type=click.Path(dir_okay=False), help="Session file to preview (default: most recent).")
def preview(session_path: str | None):
    """Print the sanitized JSONL without uploading it."""
    path = _resolve_session_path(session_path)
    try:
        content = preview_session(path)
    except SessionShareError as e:
        raise click.ClickException(str(e))
    click.echo(content, nl=False)


@main.command()
@click.option("--port", default=8080, help="Port to serve on.")
@click.option("--host", default="127.0.0.1", help="Host to bind to.")
def serve(port: int, host: str):
    """Start the HTTP API."""
    click.echo(f"Starting session-share on http://{host}:{port}")
    uvicorn.run("session_share.server:app", host=host, port=port, reload=False)
