"""filestate CLI — read one request on stdin, write one response on stdout."""

import sys
from typing import NoReturn

import click

from filestate import __version__
from filestate.codec.encoder import encode
from filestate.driver import ComplianceRunner
from filestate.errors import ConfigError, InputError
from filestate.logging import setup_logging
from filestate.request import parse_request
from filestate.settings import load_settings


@click.group()
@click.version_option(version=__version__)
def main():
    """filestate — audit and remediate declared file state.

    The request is read from stdin as a single object with a 'check_only'
    flag and a 'files' collection. The response is written to stdout.
    """


# ── Run ──────────────────────────────────────────────────────────────


@main.command()
@click.option("--check-only", is_flag=True, help="Never fix, whatever the request says")
@click.option("--config", "-c", default=None, help="YAML settings file")
def run(check_only: bool, config: str | None):
    """Check every requested file and fix what is out of compliance."""
    _execute(check_only, config)


@main.command()
@click.option("--config", "-c", default=None, help="YAML settings file")
def check(config: str | None):
    """Check every requested file without touching the filesystem."""
    _execute(True, config)


def _execute(force_check_only: bool, config: str | None) -> None:
    try:
        settings = load_settings(config)
    except ConfigError as e:
        _fail(str(e))

    setup_logging(settings.log_level, settings.log_format)

    stdin = sys.stdin.buffer
    if stdin.isatty():
        _fail("This command requires a request on stdin")

    try:
        text = stdin.read().decode("utf-8")
        request = parse_request(text, max_depth=settings.max_depth)
    except UnicodeDecodeError:
        _fail("Request is not valid UTF-8")
    except InputError as e:
        _fail(f"Invalid request: {e}")

    if force_check_only:
        request.check_only = True

    response = ComplianceRunner(chunk_size=settings.chunk_size).run(request)
    click.echo(encode(response.to_value()))


def _fail(message: str) -> NoReturn:
    """Report a fatal input/config error on stderr and exit non-zero."""
    click.echo(encode({"status": "error", "message": message}), err=True)
    sys.exit(1)


if __name__ == "__main__":
    main()
