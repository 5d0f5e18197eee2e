"""CLI commands for formhandler."""

import base64
import mimetypes
import re
import secrets
import sys
from pathlib import Path

import click

from formhandler.config import get_settings
from formhandler.form import Form
from formhandler.submission import Submission
from formhandler.uploads import UploadedFile, detect_mime_type
from formhandler.validators import ImageUploadValidator, UploadValidator

SECRET_KEY_VAR = "FORMHANDLER_SECRET_KEY"


@click.group()
@click.version_option(package_name="formhandler")
def cli():
    """formhandler - server-side HTML forms."""
    pass


@cli.command()
@click.option("--host", default="127.0.0.1", help="Host to bind to")
@click.option("--port", default=8080, type=int, help="Port to bind to")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Logging level",
)
def serve(host, port, reload, log_level):
    """Run the demo contact form application."""
    import asyncio
    import signal

    from hypercorn.asyncio import serve as hypercorn_serve
    from hypercorn.config import Config

    config = Config()
    config.application_path = "formhandler.asgi:create_app()"
    config.bind = [f"{host}:{port}"]
    config.loglevel = log_level.upper()
    config.include_server_header = False

    if reload:
        config.use_reloader = True
        from hypercorn.run import run
        run(config)
        return

    from formhandler.asgi import create_app

    try:
        app = create_app()
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    shutdown_event = asyncio.Event()

    loop = asyncio.new_event_loop()
    loop.add_signal_handler(signal.SIGINT, shutdown_event.set)
    loop.add_signal_handler(signal.SIGTERM, shutdown_event.set)
    try:
        loop.run_until_complete(
            hypercorn_serve(app, config, shutdown_trigger=shutdown_event.wait)
        )
    finally:
        loop.close()


@cli.command()
@click.option(
    "--write",
    type=click.Path(),
    default=None,
    help=f"Write {SECRET_KEY_VAR} to a .env file",
)
@click.option(
    "--format",
    "fmt",
    default="urlsafe",
    type=click.Choice(["urlsafe", "hex", "base64"]),
    help="Output format for the secret key",
)
@click.option("--length", default=32, type=int, help="Number of random bytes")
def secret(write, fmt, length):
    """Generate a secret key for signing session cookies."""
    if fmt == "urlsafe":
        key = secrets.token_urlsafe(length)
    elif fmt == "hex":
        key = secrets.token_hex(length)
    else:  # base64
        key = base64.b64encode(secrets.token_bytes(length)).decode("ascii")

    if write:
        env_path = Path(write)
        env_content = env_path.read_text() if env_path.exists() else ""

        secret_key_pattern = re.compile(rf"^{SECRET_KEY_VAR}=.*$", re.MULTILINE)
        new_line = f"{SECRET_KEY_VAR}={key}"

        if secret_key_pattern.search(env_content):
            env_content = secret_key_pattern.sub(new_line, env_content)
        else:
            if env_content and not env_content.endswith("\n"):
                env_content += "\n"
            env_content += new_line + "\n"

        env_path.write_text(env_content)
        click.echo(f"{SECRET_KEY_VAR} written to {env_path}")
    else:
        click.echo(key)


@cli.command("check-upload")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--allow-ext", multiple=True, help="Allowed extension (repeatable)")
@click.option("--deny-ext", multiple=True, help="Denied extension (repeatable)")
@click.option("--allow-type", multiple=True, help="Allowed mime type (repeatable)")
@click.option("--deny-type", multiple=True, help="Denied mime type (repeatable)")
@click.option("--max-size", type=int, default=None, help="Maximum size in bytes")
@click.option("--min-size", type=int, default=None, help="Minimum size in bytes")
@click.option("--image", is_flag=True, help="Require a readable image")
@click.option("--max-width", type=int, default=None, help="Maximum image width (with --image)")
@click.option("--max-height", type=int, default=None, help="Maximum image height (with --image)")
def check_upload(path, allow_ext, deny_ext, allow_type, deny_type, max_size, min_size, image, max_width, max_height):
    """Check a local file against upload rules, as a form would."""
    rules = {
        "max_filesize": max_size,
        "min_filesize": min_size,
        "allowed_extensions": allow_ext,
        "denied_extensions": deny_ext,
        "denied_mime_types": deny_type,
    }
    if allow_type:
        rules["allowed_mime_types"] = allow_type

    if image:
        validator = ImageUploadValidator(max_width=max_width, max_height=max_height, **rules)
    else:
        validator = UploadValidator(**rules)

    with open(path, "rb") as f:
        upload = UploadedFile(
            filename=path.name,
            content_type=mimetypes.guess_type(path.name)[0] or "application/octet-stream",
            size=path.stat().st_size,
            file=f,
        )
        form = Form(Submission(method="POST", files={"file": upload}), csrf_protection=False)
        field = form.upload_field("file").set_validator(validator)

        mime_type = detect_mime_type(upload, get_settings().uploads.sniff_bytes)
        if not field.is_valid():
            for message in field.error_messages:
                click.echo(f"{path}: {message}", err=True)
            sys.exit(1)

    click.echo(f"{path}: OK ({mime_type}, {upload.size} bytes)")


def main():
    cli()


if __name__ == "__main__":
    main()
