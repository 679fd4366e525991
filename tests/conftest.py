import csv
import sys
from pathlib import Path
from typing import Callable, Iterable, Sequence

import pytest

# Ensure project root is on sys.path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--live",
        action="store_true",
        default=False,
        help="run tests that hit tcgcsv.com",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "live: mark test as requiring live HTTP")
    config.addinivalue_line(
        "markers", "vcr: record/replay HTTP requests using pytest-recording"
    )
    config.addinivalue_line(
        "markers", "default_cassette(name): set cassette name for pytest-recording"
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if config.getoption("--live"):
        return
    skip_live = pytest.mark.skip(reason="need --live option to run")
    for item in items:
        if "live" in item.keywords:
            item.add_marker(skip_live)


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[..., Path]:
    """Write a header plus positional rows to ``tmp_path / name``."""

    def _write(name: str, header: Sequence[str], rows: Iterable[Sequence[str]] = ()) -> Path:
        path = tmp_path / name
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(header)
            writer.writerows(rows)
        return path

    return _write
