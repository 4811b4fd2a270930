"""Command-line interface using Click."""

import json
import sys
from pathlib import Path

import click

from . import __version__
from .config import SEARCH_SUGGESTION_LIMIT
from .exceptions import KashibottoError
from .pipeline import Pipeline, create_pipeline
from .utils.logging import setup_logging


def _get_pipeline(ctx) -> Pipeline:
    """Build the pipeline on first use so --help never touches the network or cache."""
    if ctx.obj.get("pipeline") is None:
        ctx.obj["pipeline"] = create_pipeline()
    return ctx.obj["pipeline"]


def _echo_json(data) -> None:
    click.echo(json.dumps(data, ensure_ascii=False, indent=2))


def _fail(ctx, message: str) -> None:
    ctx.obj["logger"].error(f"❌ {message}")
    sys.exit(1)


def _handle_unexpected(ctx, e: Exception) -> None:
    ctx.obj["logger"].error(f"❌ Unexpected error: {e}")
    if ctx.obj.get("verbose"):
        import traceback

        traceback.print_exc()
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--log-file", type=click.Path(), help="Log to file")
@click.pass_context
def cli(ctx, verbose, log_file):
    """Kashibotto - Japanese lyrics with readings and dictionary glosses."""
    ctx.ensure_object(dict)
    logger = setup_logging(
        level="DEBUG" if verbose else "INFO",
        log_file=Path(log_file) if log_file else None,
        verbose=verbose,
    )
    ctx.obj["logger"] = logger
    ctx.obj["verbose"] = verbose


@cli.command()
@click.argument("title")
@click.option("--artist", "-a", help="Artist name to narrow the search")
@click.pass_context
def lyrics(ctx, title, artist):
    """Fetch cleaned lyrics for a song."""
    try:
        text = _get_pipeline(ctx).fetch_lyrics(title, artist)
        _echo_json({"title": title, "artist": artist, "lyrics": text})
    except KashibottoError as e:
        _fail(ctx, str(e))
    except Exception as e:
        _handle_unexpected(ctx, e)


@cli.command()
@click.argument("query")
@click.option(
    "--limit",
    "-n",
    type=click.IntRange(1, SEARCH_SUGGESTION_LIMIT),
    default=SEARCH_SUGGESTION_LIMIT,
    show_default=True,
    help="Maximum number of suggestions",
)
@click.pass_context
def search(ctx, query, limit):
    """Suggest songs matching QUERY."""
    try:
        results = _get_pipeline(ctx).search_songs(query, limit)
        _echo_json({"suggestions": [r.to_suggestion() for r in results]})
    except KashibottoError as e:
        _fail(ctx, str(e))
    except Exception as e:
        _handle_unexpected(ctx, e)


@cli.command()
@click.argument("file", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--title", "-t", help="Fetch lyrics for this song instead of reading FILE")
@click.option("--artist", "-a", help="Artist name used with --title")
@click.pass_context
def process(ctx, file, title, artist):
    """Segment and annotate lyrics from FILE (stdin by default) or from Genius."""
    logger = ctx.obj["logger"]
    try:
        pipeline = _get_pipeline(ctx)
        if title:
            text = pipeline.fetch_lyrics(title, artist)
        else:
            text = file.read()
        result = pipeline.process_lyrics(text)
        logger.info(
            f"✅ Processed {len(result.lines)} lines, {result.segment_count} segments"
        )
        _echo_json(result.to_dict())
    except KashibottoError as e:
        _fail(ctx, str(e))
    except Exception as e:
        _handle_unexpected(ctx, e)


@cli.command()
@click.argument("file", type=click.File("r", encoding="utf-8"), default="-")
@click.pass_context
def segment(ctx, file):
    """Split lyrics from FILE (stdin by default) into morphemes."""
    try:
        lines = _get_pipeline(ctx).segment_lyrics(file.read())
        _echo_json([[m.to_dict() for m in line] for line in lines])
    except KashibottoError as e:
        _fail(ctx, str(e))
    except Exception as e:
        _handle_unexpected(ctx, e)


@cli.command()
@click.argument("words", nargs=-1, required=True)
@click.pass_context
def lookup(ctx, words):
    """Look up WORDS in the dictionary."""
    try:
        entries = _get_pipeline(ctx).lookup_batch(list(words))
        _echo_json(
            [
                {"word": word, "entry": entry.to_dict() if entry else None}
                for word, entry in zip(words, entries)
            ]
        )
    except KashibottoError as e:
        _fail(ctx, str(e))
    except Exception as e:
        _handle_unexpected(ctx, e)


@cli.group()
def cache():
    """Dictionary cache management commands."""
    pass


@cache.command()
@click.pass_context
def stats(ctx):
    """Show dictionary cache statistics."""
    try:
        _echo_json(_get_pipeline(ctx).dictionary.stats())
    except KashibottoError as e:
        _fail(ctx, str(e))
    except Exception as e:
        _handle_unexpected(ctx, e)


@cache.command()
@click.confirmation_option(prompt="Are you sure you want to clear the dictionary cache?")
@click.pass_context
def clear(ctx):
    """Remove every dictionary cache entry."""
    try:
        _get_pipeline(ctx).dictionary.clear()
        click.echo("✅ Dictionary cache cleared")
    except KashibottoError as e:
        _fail(ctx, str(e))
    except Exception as e:
        _handle_unexpected(ctx, e)


if __name__ == "__main__":
    cli()
