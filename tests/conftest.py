"""Custom pytest configuration and formatters for beautiful test output."""
from __future__ import annotations

import logging
import os
import re
import sys
from pathlib import Path

import pytest
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

# Set BEFORE importing spoken_numbers: module loggers are created at import time
os.environ["LOG_OUTPUT"] = "none"
os.environ.pop("SPOKEN_NUMBERS_CONFIG", None)

# Make the src layout importable without installing the package
sys.path.insert(0, str((Path(__file__).parent.parent / "src").resolve()))

from spoken_numbers.core.config import ConfigLoader, reset_config  # noqa: E402
from spoken_numbers.formatter import EnglishFormatter  # noqa: E402
from spoken_numbers.parser import DurationExtractor, NumberExtractor, NumberParser, TokenStream  # noqa: E402
from spoken_numbers.vocabulary import get_vocabulary  # noqa: E402

logging.getLogger("spoken_numbers").setLevel(logging.CRITICAL)

console = Console()

_MISMATCH_PATTERN = re.compile(r"Input '([^']*)' should (?:extract|format) to '([^']*)', got '([^']*)'")


class ExtractionTestReporter:
    """Collects extraction mismatches and prints them as one table at the end."""

    def __init__(self):
        self.failures: list[tuple[str, str, str, str]] = []
        self.passes = 0
        self.total = 0

    def record_result(self, test_name: str, input_text: str, expected: str, actual: str, passed: bool):
        self.total += 1
        if passed:
            self.passes += 1
        else:
            self.failures.append((test_name, input_text, expected, actual))

    def print_summary(self):
        if not self.failures:
            console.print(
                Panel.fit(
                    f"[bold green]All {self.total} checked tests passed[/bold green]",
                    title="Extraction Results",
                    border_style="green",
                )
            )
            return

        table = Table(title="Extraction Mismatches", show_header=True, header_style="bold magenta")
        table.add_column("Test", style="cyan", no_wrap=False)
        table.add_column("Input", style="yellow")
        table.add_column("Expected", style="green")
        table.add_column("Actual", style="red")
        for test_name, input_text, expected, actual in self.failures:
            table.add_row(test_name.split("::")[-1], input_text, expected, actual)
        console.print(table)

        fail_count = len(self.failures)
        console.print(
            Panel.fit(
                f"[bold red]Failed:[/bold red] {fail_count} | [bold green]Passed:[/bold green] {self.passes} | [bold]Total:[/bold] {self.total}",
                title="Summary",
                border_style="red",
            )
        )


reporter = ExtractionTestReporter()


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Feed parser and formatter test outcomes to the reporter."""
    outcome = yield
    report = outcome.get_result()

    if report.when != "call" or not any(part in str(item.fspath) for part in ("parser", "formatter")):
        return
    if report.passed:
        reporter.record_result(item.nodeid, "", "", "", True)
        return

    match = _MISMATCH_PATTERN.search(str(report.longrepr))
    if match:
        reporter.record_result(item.nodeid, match.group(1), match.group(2), match.group(3), False)


def pytest_sessionfinish(session, exitstatus):
    if reporter.total > 0:
        console.print("\n")
        reporter.print_summary()


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Run every test without any config file and with a fresh global config."""
    monkeypatch.delenv("SPOKEN_NUMBERS_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    reset_config()
    yield
    reset_config()


@pytest.fixture(scope="session")
def vocabulary():
    return get_vocabulary("en")


@pytest.fixture
def parser():
    return NumberParser("en", ConfigLoader())


@pytest.fixture(scope="session")
def formatter():
    return EnglishFormatter()


@pytest.fixture
def extract_duration_from(vocabulary):
    """Extract a duration the way the facade does, returning the duration and the stream."""

    def extract(text: str, short_scale: bool = True):
        stream = TokenStream(text)
        numbers = NumberExtractor(stream, short_scale=short_scale, vocabulary=vocabulary)
        duration = DurationExtractor(stream, numbers.extract_one_number_no_ordinal, vocabulary=vocabulary).extract()
        return duration, stream

    return extract


@pytest.fixture
def extract_number_from(vocabulary):
    """Extract the first number at the start of ``text``."""

    def extract(text: str, short_scale: bool = True, ordinals_allowed: bool = True, prefer_ordinal: bool = False):
        stream = TokenStream(text)
        extractor = NumberExtractor(stream, short_scale=short_scale, vocabulary=vocabulary, prefer_ordinal=prefer_ordinal)
        return extractor.extract_number(ordinals_allowed), stream

    return extract
