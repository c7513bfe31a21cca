import json
import logging
import re
import sys
from pathlib import Path

import click

from .config import ExtractionConfig, FetchConfig
from .exceptions import ExtractError, FetchError, FetchErrorKind, UnsupportedSourceError
from .registry import classify_url, select_extractor, supported_sites


def _slugify(text: str) -> str:
    """Convert a string to a lowercase hyphenated slug suitable for filenames."""
    text = text.lower()
    text = re.sub(r"[^\w\s-]", "", text)   # drop punctuation, keep kana/kanji
    text = re.sub(r"[\s_]+", "-", text)     # spaces/underscores → hyphens
    text = re.sub(r"-{2,}", "-", text)      # collapse multiple hyphens
    return text.strip("-")


def _default_filename(artist: str | None, title: str | None) -> str:
    parts = [_slugify(p) for p in (artist, title) if p]
    stem = "-".join(p for p in parts if p) or "chordsheet"
    return f"{stem}.json"


def _list_sites(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    for site in supported_sites():
        click.echo(f"{site.name:<10} {site.domain:<16} {site.example_url}")
    ctx.exit()


@click.command()
@click.argument("url")
@click.option("--html", "html_path", default=None, metavar="PATH",
              type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Parse a saved copy of the page instead of fetching URL.")
@click.option("-o", "--output", "output_path", default=None, metavar="PATH",
              help="Output file path (default: <artist>-<title>.json)")
@click.option("--stdout", is_flag=True, default=False,
              help="Print to stdout instead of writing a file.")
@click.option("--timeout", default=30.0, show_default=True,
              type=click.FloatRange(min=0, min_open=True),
              help="HTTP timeout in seconds.")
@click.option("--indent", default=2, show_default=True, type=click.IntRange(min=0),
              help="JSON indentation.")
@click.option("-v", "--verbose", is_flag=True, default=False,
              help="Log extraction steps to stderr.")
@click.option("--list-sites", is_flag=True, expose_value=False, is_eager=True,
              callback=_list_sites, help="List supported sites and exit.")
def main(
    url: str,
    html_path: Path | None,
    output_path: str | None,
    stdout: bool,
    timeout: float,
    indent: int,
    verbose: bool,
) -> None:
    """Extract a chord sheet page to JSON.

    \b
    Supported sites:
      - www.ufret.jp
      - music.j-total.net
      - gakufu.gakki.me
      - ja.chordwiki.org
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # --- Resolve extractor ---
    try:
        extractor = select_extractor(classify_url(url), ExtractionConfig())
    except UnsupportedSourceError as exc:
        click.echo(f"Error: {exc}", err=True)
        click.echo(
            "Supported sites: " + ", ".join(site.domain for site in supported_sites()),
            err=True,
        )
        sys.exit(1)

    # --- Fetch + parse ---
    try:
        if html_path is not None:
            sheet = extractor.extract(html_path.read_text(encoding="utf-8")).with_source(url)
        else:
            sheet = extractor.scrape(url, FetchConfig(timeout=timeout))
    except FetchError as exc:
        msg = f"Error: Could not fetch {exc.url}"
        if exc.kind is FetchErrorKind.STATUS:
            msg += f" (HTTP {exc.status_code})"
        elif exc.kind is FetchErrorKind.TIMEOUT:
            msg += f" (timed out after {timeout}s)"
        if exc.status_code == 403:
            msg += "; save the page in a browser and pass it with --html"
        click.echo(msg, err=True)
        sys.exit(1)
    except ExtractError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    # --- Output ---
    text = json.dumps(sheet.to_dict(), ensure_ascii=False, indent=indent) + "\n"
    if stdout:
        click.echo(text, nl=False)
        return

    dest = Path(output_path) if output_path else Path(_default_filename(sheet.artist, sheet.title))
    dest.write_text(text, encoding="utf-8")
    click.echo(f"Written to {dest}")
