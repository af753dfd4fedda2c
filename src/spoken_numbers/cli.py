#!/usr/bin/env python3
"""Command line interface for spoken-numbers"""
import json as json_lib
import sys
from fractions import Fraction

import rich_click as click
from rich.console import Console
from rich.table import Table
from rich_click import RichGroup

from spoken_numbers import __version__
from spoken_numbers.core.config import ConfigurationError, get_config, load_config
from spoken_numbers.core.logging import set_log_level
from spoken_numbers.parser_formatter import ParserFormatter

# Set up rich-click configuration globally
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.USE_MARKDOWN = False
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.SHOW_METAVARS_COLUMN = False
click.rich_click.APPEND_METAVARS_HELP = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "#ff5555"
click.rich_click.ERRORS_SUGGESTION = "Try running the '--help' flag for more information."
click.rich_click.MAX_WIDTH = 120
click.rich_click.STYLE_OPTION = "#ff79c6"  # Dracula Pink - for option flags
click.rich_click.STYLE_SWITCH = "#50fa7b"  # Dracula Green - for switches
click.rich_click.STYLE_HEADER_TEXT = "bold yellow"
click.rich_click.STYLE_USAGE = "#BD93F9"  # Purple - for "Usage:" line
click.rich_click.STYLE_COMMAND = "#50fa7b"

console = Console()


def _parser_formatter(ctx) -> ParserFormatter:
    if "parser_formatter" not in ctx.obj:
        ctx.obj["parser_formatter"] = ParserFormatter(ctx.obj.get("language"))
    return ctx.obj["parser_formatter"]


def _emit_json(payload) -> None:
    click.echo(json_lib.dumps(payload, ensure_ascii=False))


def _parse_number(text: str) -> Fraction:
    try:
        return Fraction(text.replace(",", ""))
    except (ValueError, ZeroDivisionError) as e:
        raise click.BadParameter(f"'{text}' is not a number") from e


@click.group(cls=RichGroup, context_settings={"help_option_names": ["-h", "--help"], "max_content_width": 120})
@click.version_option(version=__version__, prog_name="spoken-numbers")
@click.option("--language", type=str, default=None, help="Language code (defaults to the config file)")
@click.option("--long-scale", is_flag=True, help="Read and write 'billion' as 10^12")
@click.option("--ordinal", is_flag=True, help="Prefer ordinals for ambiguous words like 'second'")
@click.option("--json", is_flag=True, help="Output results in JSON format")
@click.option("--config", type=click.Path(dir_okay=False), help="Path to configuration file")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, language=None, long_scale=False, ordinal=False, json=False, config=None, debug=False):
    """[bold color(6)]spoken-numbers[/bold color(6)] - numbers and durations from English text"""
    if ctx.obj is None:
        ctx.obj = {}

    try:
        if config:
            load_config(config)
        else:
            get_config()
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    if debug:
        set_log_level("DEBUG")

    ctx.obj["language"] = language
    ctx.obj["short_scale"] = False if long_scale else None
    ctx.obj["prefer_ordinal"] = True if ordinal else None
    ctx.obj["json"] = json


@main.command()
@click.argument("text")
@click.pass_context
def duration(ctx, text):
    """Extract the first duration from TEXT"""
    pf = _parser_formatter(ctx)
    found = pf.extract_duration(text, short_scale=ctx.obj["short_scale"])

    if ctx.obj["json"]:
        if found is None:
            _emit_json({"text": text, "duration": None})
        else:
            _emit_json(
                {
                    "text": text,
                    "duration": {
                        "seconds": found.seconds,
                        "nanos": found.nanos,
                        "total_seconds": found.total_seconds(),
                        "spoken": pf.nice_duration(found),
                    },
                }
            )
    elif found is None:
        console.print("[yellow]No duration found[/yellow]")
    else:
        console.print(f"[bold green]{found}[/bold green] ({pf.nice_duration(found, speech=False)})")

    if found is None:
        sys.exit(1)


@main.command()
@click.argument("text")
@click.pass_context
def numbers(ctx, text):
    """Extract every number from TEXT"""
    pf = _parser_formatter(ctx)
    short_scale = ctx.obj["short_scale"]
    prefer_ordinal = ctx.obj["prefer_ordinal"]
    found = pf.parser.extract_all_numbers(text, short_scale, prefer_ordinal)

    if ctx.obj["json"]:
        _emit_json(
            {
                "text": text,
                "pieces": pf.extract_numbers(text, short_scale, prefer_ordinal),
                "numbers": [
                    {
                        "value": number.number,
                        "exact": str(number.value),
                        "ordinal": number.ordinal,
                        "approximate": number.approximate,
                    }
                    for number in found
                ],
            }
        )
        return

    if not found:
        console.print("[yellow]No numbers found[/yellow]")
        return

    table = Table(title="Numbers", show_header=True, header_style="bold magenta")
    table.add_column("Value", style="green")
    table.add_column("Exact", style="cyan")
    table.add_column("Ordinal")
    table.add_column("Approximate")
    for number in found:
        table.add_row(str(number.number), str(number.value), str(number.ordinal), str(number.approximate))
    console.print(table)


@main.command()
@click.argument("number")
@click.option("--places", type=int, default=None, help="Maximum decimal places")
@click.pass_context
def pronounce(ctx, number, places):
    """Spell out NUMBER (e.g. 21, 1.5, 3/4)"""
    pf = _parser_formatter(ctx)
    value = _parse_number(number)
    spoken = pf.pronounce_number(
        value,
        places=places,
        short_scale=ctx.obj["short_scale"],
        ordinal=bool(ctx.obj["prefer_ordinal"]),
    )
    if ctx.obj["json"]:
        _emit_json({"number": number, "spoken": spoken, "nice": pf.nice_number(value)})
    else:
        console.print(spoken)


@main.command("nice-duration")
@click.argument("seconds")
@click.option("--digits", is_flag=True, help="Write '1d 2:03:04' instead of words")
@click.pass_context
def nice_duration(ctx, seconds, digits):
    """Spell out a duration of SECONDS"""
    pf = _parser_formatter(ctx)
    text = pf.nice_duration(_parse_number(seconds), speech=not digits)
    if ctx.obj["json"]:
        _emit_json({"seconds": seconds, "spoken": text})
    else:
        console.print(text)


if __name__ == "__main__":
    main()
