"""mdbook-infobox CLI entrypoint.

mdBook first runs ``mdbook-infobox supports <renderer>`` and then, if the exit
status is zero, pipes ``[context, book]`` as JSON into ``mdbook-infobox`` and
reads the processed book back from stdout.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any

import click

from mdbook_infobox import __version__
from mdbook_infobox.config import load_config
from mdbook_infobox.errors import InfoboxError, InfoboxInputError
from mdbook_infobox.preprocessor import InfoboxPreprocessor, supports_renderer

logger = logging.getLogger("mdbook_infobox.cli")

# Release line of mdBook whose JSON book format this tool reads.
MDBOOK_VERSION = (0, 4)


@click.group(invoke_without_command=True, context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--verbose", "-v", count=True, help="Log more to stderr (-v info, -vv debug)")
@click.version_option(__version__, prog_name="mdbook-infobox")
@click.pass_context
def main(ctx: click.Context, verbose: int) -> None:
    """Render {{#infobox}} blocks of an mdBook book as HTML tables."""
    _configure_logging(verbose)
    if ctx.invoked_subcommand is not None:
        return

    stdin = click.get_text_stream("stdin")
    try:
        context, book = _read_payload(stdin.read())
        preprocessor = InfoboxPreprocessor(load_config(context))
        processed = preprocessor.run(context, book)
    except InfoboxError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(json.dumps(processed), nl=False)


@main.command()
@click.argument("renderer")
@click.pass_context
def supports(ctx: click.Context, renderer: str) -> None:
    """Exit with status 0 if RENDERER is supported, 1 otherwise."""
    supported = supports_renderer(renderer)
    logger.debug("renderer %r supported: %s", renderer, supported)
    ctx.exit(0 if supported else 1)


def _read_payload(raw: str) -> tuple[dict[str, Any], dict[str, Any]]:
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InfoboxInputError(f"invalid JSON on stdin: {exc}") from exc

    if not isinstance(payload, list) or len(payload) != 2:
        raise InfoboxInputError("expected a JSON array of [context, book] on stdin")

    context, book = payload
    if not isinstance(context, dict) or not isinstance(book, dict):
        raise InfoboxInputError("context and book must both be JSON objects")

    _check_mdbook_version(context.get("mdbook_version"))
    return context, book


def _check_mdbook_version(version: Any) -> None:
    if not isinstance(version, str):
        return
    parts = version.split(".")
    try:
        major_minor = (int(parts[0]), int(parts[1]))
    except (IndexError, ValueError):
        logger.warning("could not parse mdbook version %r", version)
        return
    if major_minor != MDBOOK_VERSION:
        logger.warning(
            "mdbook-infobox was written against mdbook %d.%d but is being called from mdbook %s",
            *MDBOOK_VERSION,
            version,
        )


def _configure_logging(verbose: int) -> None:
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(stream=sys.stderr, level=level, format="%(levelname)s %(name)s: %(message)s")


if __name__ == "__main__":  # pragma: no cover
    main()
