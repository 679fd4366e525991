#!/usr/bin/env python
import argparse
import datetime as dt
import os
import sys
from functools import partial
from typing import Dict, List, Optional

import pandas as pd

import config
import fetch_tcgcsv as tcg
from data.merge_results import MergeError, merge_csv_files
from utils.console import console, err_console
from utils.http_client import make_session

print = partial(console.print, style="green", markup=False)
warn = partial(err_console.print, style="yellow", markup=False)

EXIT_OK = 0
EXIT_NO_DATA = 1
EXIT_MERGE_FAILED = 2


def merged_filename(now: Optional[dt.datetime] = None) -> str:
    now = now or dt.datetime.now()
    return f"Prices_{now:%Y%m%d_%H%M}.csv"


def choose_groups(groups: List[Dict], mode: str) -> List[Dict]:
    if mode == "auto":
        return tcg.select_groups(groups, config.AUTO_GROUPS)
    if mode == "select":
        picked = tcg.prompt_group_selection(groups)
        return [picked] if picked else []
    return list(groups)


def summarize(path: str) -> pd.DataFrame:
    """Count surviving rows per ``groupId`` in the merged file at ``path``."""
    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    except pd.errors.EmptyDataError:
        # every source was empty, so the merged file has no header
        return pd.DataFrame({"rows": pd.Series([], dtype="int64")}, index=pd.Index([], name="groupId"))
    if "groupId" not in df:
        return pd.DataFrame({"rows": [len(df)]}, index=pd.Index(["(all)"], name="groupId"))
    return df.groupby("groupId", sort=False).size().to_frame("rows")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Download tcgcsv.com group prices and merge them into one CSV.")
    ap.add_argument("--mode", choices=("all", "auto", "select"), default=config.MODE)
    ap.add_argument("--category", type=int, default=config.CATEGORY_ID)
    ap.add_argument("--download-dir", default=config.DOWNLOAD_DIR)
    ap.add_argument("--results-dir", default=config.RESULTS_DIR)
    ap.add_argument("--keep-downloads", action="store_true")
    ap.add_argument("--no-cache", dest="use_cache", action="store_false", default=config.USE_CACHE)
    return ap.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    # Propagate run-time config to the shared config module
    settings = dict(
        MODE=args.mode,
        CATEGORY_ID=args.category,
        DOWNLOAD_DIR=args.download_dir,
        RESULTS_DIR=args.results_dir,
        USE_CACHE=args.use_cache,
    )
    for k, v in settings.items():
        setattr(config, k, v)

    print("⚙️ Starting SWU Price Tracker...")
    session = make_session(use_cache=args.use_cache)
    try:
        groups = tcg.fetch_groups(session, args.category)
    except tcg.FetchError as e:
        warn(f"[tracker] Could not fetch group list: {e}")
        return EXIT_NO_DATA
    if not groups:
        warn("[tracker] No results found.")
        return EXIT_NO_DATA

    selected = choose_groups(groups, args.mode)
    print(f"[tracker] Mode {args.mode} • {len(selected)} of {len(groups)} groups selected")
    report = tcg.download_groups(session, selected, args.download_dir, category_id=args.category)
    if not report.paths:
        warn("[tracker] No CSV files to merge. Exiting.")
        return EXIT_NO_DATA

    merged_path = os.path.join(args.results_dir, merged_filename())
    try:
        summary = merge_csv_files(report.paths, merged_path)
    except MergeError as e:
        err_console.print(f"[tracker] Merge failed: {e}", style="bold red", markup=False)
        warn(f"[tracker] Keeping {len(report.paths)} downloaded files in {args.download_dir} for inspection")
        return EXIT_MERGE_FAILED

    if not args.keep_downloads:
        removed = tcg.delete_files(report.paths)
        print(f"[tracker] Removed {removed} downloaded files")

    print("\n=== Summary ===")
    console.print(summarize(summary.output_file).to_string(), markup=False)
    print(f"\nMerged: {summary.rows_written} rows, {len(summary.columns)} columns → {summary.output_file}")
    if report.failures:
        failed = ", ".join(str(g.get("groupId")) for g, _ in report.failures)
        warn(f"[tracker] Groups that failed to download: {failed}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
