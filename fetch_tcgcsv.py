import os
import re
import time
from dataclasses import dataclass, field
from datetime import date
from functools import partial
from typing import Dict, Iterable, List, Optional, Tuple

import requests
from rich.prompt import Prompt

import config
from utils.console import console, err_console
from utils.http_client import make_session
from utils.throttle import polite_sleep
from utils.url import groups_url, prices_csv_url

print = partial(console.print, style="magenta", markup=False)
warn = partial(err_console.print, style="yellow", markup=False)

CHUNK_SIZE = 64 * 1024
_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9]")


class FetchError(Exception):
    """A catalog request or CSV download failed."""


@dataclass
class DownloadReport:
    paths: List[str] = field(default_factory=list)
    failures: List[Tuple[Dict, str]] = field(default_factory=list)


def safe_group_name(name: str) -> str:
    return _UNSAFE_CHARS.sub("_", name)


def build_filename(group: Dict, day: Optional[date] = None) -> str:
    """Return ``{groupId}_{safe name}_Prices_{YYYYMMDD}.csv`` for ``group``.

    The group id keeps names that differ only in punctuation apart.
    """
    day = day or date.today()
    name = safe_group_name(str(group.get("name") or ""))
    return f"{group.get('groupId')}_{name}_Prices_{day:%Y%m%d}.csv"


def fetch_groups(session: requests.Session, category_id: Optional[int] = None) -> List[Dict]:
    """Return the groups listed in a category catalog, in API order."""
    url = groups_url(config.CATEGORY_ID if category_id is None else category_id)
    try:
        resp = session.get(url, timeout=config.REQUEST_TIMEOUT)
    except requests.RequestException as e:
        raise FetchError(f"Request error for {url}: {e}") from e
    if resp.status_code != 200:
        raise FetchError(f"Failed to get '{url}' ({resp.status_code})")
    try:
        data = resp.json()
    except ValueError as e:
        raise FetchError(f"Invalid JSON from {url}: {e}") from e
    results = data.get("results") if isinstance(data, dict) else None
    return [g for g in results or [] if isinstance(g, dict) and "groupId" in g]


def download_csv(session: requests.Session, url: str, path: str) -> str:
    """Stream ``url`` to ``path`` and return ``path``.

    Raises ``FetchError`` on a non-200 response or a transport error. Any
    partially written file is removed.
    """
    try:
        with session.get(url, timeout=config.REQUEST_TIMEOUT, stream=True) as resp:
            if resp.status_code != 200:
                raise FetchError(f"Failed to get '{url}' ({resp.status_code})")
            with open(path, "wb") as f:
                for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
    except (requests.RequestException, OSError) as e:
        _remove_partial(path)
        raise FetchError(f"Download of '{url}' failed: {e}") from e
    return path


def _remove_partial(path: str) -> None:
    # only remove what was actually created
    if os.path.exists(path):
        try:
            os.remove(path)
        except OSError as e:
            warn(f"[tcgcsv] Could not remove partial file {path}: {e}")


def download_groups(
    session: requests.Session,
    groups: Iterable[Dict],
    output_dir: Optional[str] = None,
    day: Optional[date] = None,
    category_id: Optional[int] = None,
) -> DownloadReport:
    """Download one prices CSV per group, in order, into ``output_dir``.

    Failures are collected in the report rather than raised, so one bad
    group does not stop the batch.
    """
    output_dir = output_dir or config.DOWNLOAD_DIR
    category_id = config.CATEGORY_ID if category_id is None else category_id
    os.makedirs(output_dir, exist_ok=True)
    report = DownloadReport()
    groups = list(groups)
    start_ts = time.time()
    for idx, group in enumerate(groups, 1):
        group_id = group.get("groupId")
        url = prices_csv_url(category_id, group_id)
        path = os.path.join(output_dir, build_filename(group, day))
        if path in report.paths:
            warn(f"[tcgcsv] Group {group_id} already downloaded to {path}; skipping")
            report.failures.append((group, f"duplicate of {path}"))
            continue
        if idx > 1:
            polite_sleep(config.DOWNLOAD_DELAY_RANGE)
        try:
            download_csv(session, url, path)
        except FetchError as e:
            warn(f"[tcgcsv] Failed to download group {group_id}: {e}")
            report.failures.append((group, str(e)))
            continue
        report.paths.append(path)
        print(f"[tcgcsv] ✓ {idx}/{len(groups)} CSV saved to {path}")

    elapsed = time.time() - start_ts
    print(f"[tcgcsv] Downloaded {len(report.paths)} of {len(groups)} groups in {elapsed:.1f}s • failed {len(report.failures)}")
    return report


def select_groups(groups: List[Dict], group_ids: Iterable[int]) -> List[Dict]:
    by_id = {g.get("groupId"): g for g in groups}
    selected: List[Dict] = []
    for group_id in group_ids:
        group = by_id.get(group_id)
        if group is None:
            warn(f"[tcgcsv] Group ID {group_id} not found.")
            continue
        selected.append(group)
    return selected


def prompt_group_selection(groups: List[Dict]) -> Optional[Dict]:
    """Print a numbered list of ``groups`` and return the one the user picks."""
    print("\nAvailable Options:")
    for index, group in enumerate(groups, 1):
        print(f"{index}. {group.get('groupId')}_{group.get('name')}")
    answer = Prompt.ask("\nSelect an option by number", console=console)
    try:
        index = int(answer.strip()) - 1
    except ValueError:
        index = -1
    if not 0 <= index < len(groups):
        warn("[tcgcsv] Invalid selection.")
        return None
    selected = groups[index]
    print(f"\nYou selected: {selected.get('groupId')}_{selected.get('name')}")
    return selected


def delete_files(paths: Iterable[str]) -> int:
    """Delete ``paths`` that exist; return how many were removed."""
    removed = 0
    for path in paths:
        if not os.path.exists(path):
            warn(f"[tcgcsv] File not found: {path}")
            continue
        try:
            os.remove(path)
        except OSError as e:
            warn(f"[tcgcsv] Failed to delete {path}: {e}")
            continue
        removed += 1
    return removed


def main() -> None:
    session = make_session(use_cache=config.USE_CACHE)
    groups = fetch_groups(session, config.CATEGORY_ID)
    print(f"[tcgcsv] {len(groups)} groups in category {config.CATEGORY_ID}")
    for group in groups:
        print(f"{group.get('groupId')}\t{group.get('name')}")


if __name__ == "__main__":
    main()
