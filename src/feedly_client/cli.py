"""CLI interface for the Feedly client using Typer."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, List, NoReturn, Optional

import typer
import yaml
from pydantic import BaseModel
from typing_extensions import Annotated

from . import __version__
from .config import create_example_config
from .errors import FeedlyError
from .main import FeedlyApp


app = typer.Typer(
    name="feedly-client",
    help="Command line access to the Feedly Cloud API",
    add_completion=False,
)

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging")]
TokenOption = Annotated[Optional[str], typer.Option("--token", "-t", help="Access token (defaults to the stored one)")]


def _load_app(config_file: Optional[Path], verbose: bool = False) -> FeedlyApp:
    try:
        return FeedlyApp(config_file, verbose=verbose)
    except (FeedlyError, ValueError, OSError, yaml.YAMLError) as e:
        typer.echo(f"✗ Error loading config: {e}", err=True)
        raise typer.Exit(1)


def _echo_json(value: Any) -> None:
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json", by_alias=True, exclude_none=True)
    elif isinstance(value, list):
        value = [
            v.model_dump(mode="json", by_alias=True, exclude_none=True) if isinstance(v, BaseModel) else v
            for v in value
        ]
    typer.echo(json.dumps(value, indent=2, ensure_ascii=False))


def _fail(e: Exception) -> NoReturn:
    typer.echo(f"✗ Error: {e}", err=True)
    raise typer.Exit(1)


@app.command("auth-url")
def auth_url(
    callback: Annotated[str, typer.Option("--callback", help="Redirect URI registered for the client")],
    config_file: ConfigOption = None,
) -> None:
    """Print the OAuth authorization URL."""
    app_instance = _load_app(config_file)
    typer.echo(app_instance.client.get_code_url(callback))


@app.command()
def token(
    code: Annotated[str, typer.Option("--code", help="Authorization code from the callback")],
    redirect_uri: Annotated[str, typer.Option("--redirect-uri", help="Callback URL used to obtain the code")],
    save: Annotated[bool, typer.Option("--save", help="Store the access token in the config file")] = False,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Exchange an authorization code for an access token."""
    app_instance = _load_app(config_file, verbose)
    try:
        result = app_instance.client.get_access_token(redirect_uri, code)
        if save:
            app_instance.store_token(result)
    except (FeedlyError, OSError) as e:
        _fail(e)
    _echo_json(result)


@app.command()
def refresh(
    refresh_token: Annotated[str, typer.Option("--refresh-token", help="Refresh token from a previous exchange")],
    save: Annotated[bool, typer.Option("--save", help="Store the new access token in the config file")] = False,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Get a new access token from a refresh token."""
    app_instance = _load_app(config_file, verbose)
    try:
        result = app_instance.client.refresh_access_token(refresh_token)
        if save:
            app_instance.store_token(result)
    except (FeedlyError, OSError) as e:
        _fail(e)
    _echo_json(result)


@app.command()
def profile(
    access_token: TokenOption = None,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Show the user's profile."""
    app_instance = _load_app(config_file, verbose)
    try:
        result = app_instance.client.get_user_profile(app_instance.resolve_token(access_token))
    except FeedlyError as e:
        _fail(e)
    _echo_json(result)


@app.command()
def subscriptions(
    access_token: TokenOption = None,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """List the user's subscriptions."""
    app_instance = _load_app(config_file, verbose)
    try:
        result = app_instance.client.get_user_subscriptions(app_instance.resolve_token(access_token))
    except FeedlyError as e:
        _fail(e)
    _echo_json(result)


@app.command()
def contents(
    stream_id: Annotated[str, typer.Argument(help="Stream id, e.g. feed/https://example.com/rss")],
    unread_only: Annotated[bool, typer.Option("--unread-only", help="Only unread entries")] = False,
    newer_than: Annotated[
        Optional[datetime],
        typer.Option("--newer-than", help="Only entries newer than this date (UTC when no offset given)"),
    ] = None,
    access_token: TokenOption = None,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Fetch entries of a stream."""
    app_instance = _load_app(config_file, verbose)
    try:
        result = app_instance.client.get_feed_content(
            app_instance.resolve_token(access_token),
            stream_id,
            unread_only,
            newer_than if newer_than is not None else 0,
        )
    except FeedlyError as e:
        _fail(e)
    _echo_json(result)


@app.command("mark-read")
def mark_read(
    entry_ids: Annotated[List[str], typer.Argument(help="Entry ids to mark as read")],
    access_token: TokenOption = None,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Mark entries as read."""
    app_instance = _load_app(config_file, verbose)
    try:
        result = app_instance.client.mark_article_read(app_instance.resolve_token(access_token), entry_ids)
    except FeedlyError as e:
        _fail(e)

    if not result.ok:
        typer.echo(f"✗ Feedly answered HTTP {result.status_code}: {result.text}", err=True)
        raise typer.Exit(1)
    typer.echo(f"✓ Marked {len(entry_ids)} entries as read")


@app.command()
def save(
    entry_ids: Annotated[List[str], typer.Argument(help="Entry ids to save for later")],
    user_id: Annotated[
        Optional[str],
        typer.Option("--user-id", help="Feedly user id (looked up from the profile when omitted)"),
    ] = None,
    access_token: TokenOption = None,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Save entries for later."""
    app_instance = _load_app(config_file, verbose)
    try:
        resolved_token = app_instance.resolve_token(access_token)
        if not user_id:
            user_id = app_instance.client.get_user_profile(resolved_token).id
        result = app_instance.client.save_for_later(resolved_token, user_id, entry_ids)
    except FeedlyError as e:
        _fail(e)

    if not result.ok:
        typer.echo(f"✗ Feedly answered HTTP {result.status_code}: {result.text}", err=True)
        raise typer.Exit(1)
    typer.echo(f"✓ Saved {len(entry_ids)} entries for later")


@app.command()
def config(
    show: Annotated[bool, typer.Option("--show", help="Show current config")] = False,
    example: Annotated[bool, typer.Option("--example", help="Generate example config")] = False,
    config_file: ConfigOption = None,
) -> None:
    """Manage the client configuration."""
    if example:
        typer.echo(create_example_config())
    elif show:
        app_instance = _load_app(config_file)
        data = app_instance.config.model_dump()
        for key in ("client_secret", "token", "secret"):
            if data["client"].get(key):
                data["client"][key] = "***"
        typer.echo(yaml.safe_dump(data, default_flow_style=False, indent=2))
    else:
        typer.echo("Use --show to view config or --example to generate example")


@app.command()
def info(
    config_file: ConfigOption = None,
) -> None:
    """Show version and configuration information."""
    typer.echo(f"feedly-client v{__version__}")

    app_instance = _load_app(config_file)
    info_data = app_instance.get_info()
    typer.echo(f"  Config file: {info_data['config_file']}")
    typer.echo(f"  Service host: {info_data['service_host']}")
    typer.echo(f"  Sandbox: {'yes' if info_data['sandbox'] else 'no'}")
    typer.echo(f"  Client id: {info_data['client_id']}")
    typer.echo(f"  Token stored: {'yes' if info_data['token_stored'] else 'no'}")
    if info_data['additional_headers']:
        typer.echo(f"  Extra headers: {', '.join(info_data['additional_headers'])}")
    typer.echo(f"  Log level: {info_data['log_level']}")
    if info_data['log_file']:
        typer.echo(f"  Log file: {info_data['log_file']}")


if __name__ == "__main__":
    app()
