import argparse
import collections.abc
import csv
import os
from dataclasses import dataclass, field
from functools import partial
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from utils.console import console, err_console

print = partial(console.print, style="cyan", markup=False)
warn = partial(err_console.print, style="yellow", markup=False)

KEY_FIELDS = ("productId", "groupId")
KEY_SEPARATOR = "_"


class MergeError(Exception):
    """Base class for merge failures."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


class ReadError(MergeError):
    """An input file is missing, unreadable or not valid CSV."""


class WriteError(MergeError):
    """The merged file could not be created or written."""


@dataclass
class MergeSummary:
    files: List[str]
    output_file: str
    columns: List[str] = field(default_factory=list)
    rows_read: int = 0
    rows_written: int = 0


def row_key(row: Mapping[str, Optional[str]]) -> str:
    """Return the ``productId_groupId`` identity of ``row``.

    Missing fields are treated as empty strings, so rows lacking either
    column all collapse onto the same unreliable key.
    """
    return KEY_SEPARATOR.join(row.get(name) or "" for name in KEY_FIELDS)


def _read_file(
    path: str,
    columns: Dict[str, None],
    merged: Dict[str, Dict[str, Optional[str]]],
) -> int:
    count = 0
    try:
        with open(path, newline="", encoding="utf-8-sig") as f:
            reader = csv.DictReader(f, strict=True)
            header = reader.fieldnames or []
            for name in header:
                columns.setdefault(name, None)
            missing = [name for name in KEY_FIELDS if name not in header]
            if missing:
                warn(f"[merge] {path} has no {', '.join(missing)} column; rows will share an unreliable key")
            for row in reader:
                # later rows replace earlier ones but keep the first position
                merged[row_key(row)] = row
                count += 1
    except FileNotFoundError as exc:
        raise ReadError(path, "file not found") from exc
    except UnicodeDecodeError as exc:
        raise ReadError(path, f"not valid UTF-8 ({exc.reason})") from exc
    except csv.Error as exc:
        raise ReadError(path, f"malformed CSV: {exc}") from exc
    except OSError as exc:
        raise ReadError(path, exc.strerror or str(exc)) from exc
    return count


def _write_merged(
    output_file: str,
    columns: List[str],
    rows: Iterable[Mapping[str, Optional[str]]],
) -> int:
    count = 0
    try:
        parent = os.path.dirname(output_file)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(output_file, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f, quoting=csv.QUOTE_ALL, lineterminator="\n")
            writer.writerow(columns)
            for row in rows:
                writer.writerow(["" if row.get(col) is None else row.get(col) for col in columns])
                count += 1
    except OSError as exc:
        raise WriteError(output_file, exc.strerror or str(exc)) from exc
    return count


def merge_csv_files(file_paths: Sequence[str], output_file: str) -> MergeSummary:
    """Merge ``file_paths`` into a single de-duplicated CSV at ``output_file``.

    Files are read in the order given and rows are keyed by ``productId`` and
    ``groupId``. When a key repeats, the row read last replaces the earlier
    one while keeping the position where the key first appeared. The output
    header is the union of all input headers in first-seen order, and every
    field is double-quoted.

    Raises ``ReadError`` before anything is written if an input cannot be
    read, and ``WriteError`` if the output cannot be written. A failed write
    may leave a partial ``output_file`` behind.
    """
    if isinstance(file_paths, (str, bytes)) or not isinstance(file_paths, collections.abc.Sequence):
        raise TypeError("file_paths must be an ordered sequence of paths")
    if not file_paths:
        raise ValueError("no CSV files to merge")

    paths = [os.fspath(p) for p in file_paths]
    output_file = os.fspath(output_file)

    columns: Dict[str, None] = {}
    merged: Dict[str, Dict[str, Optional[str]]] = {}
    rows_read = 0
    for path in paths:
        rows_read += _read_file(path, columns, merged)

    ordered_columns = list(columns)
    rows_written = _write_merged(output_file, ordered_columns, merged.values())

    print(f"[merge] Merged {rows_read} rows from {len(paths)} files into {rows_written} rows → {output_file}")
    return MergeSummary(
        files=paths,
        output_file=output_file,
        columns=ordered_columns,
        rows_read=rows_read,
        rows_written=rows_written,
    )


def _parse_args(argv: Optional[List[str]] = None) -> Tuple[List[str], str]:
    ap = argparse.ArgumentParser(description="Merge price CSV files by productId and groupId.")
    ap.add_argument("files", nargs="+", help="input CSV files; later files win on duplicate keys")
    ap.add_argument("-o", "--output", required=True, help="merged CSV to write")
    args = ap.parse_args(argv)
    return args.files, args.output


def main(argv: Optional[List[str]] = None) -> int:
    files, output = _parse_args(argv)
    try:
        merge_csv_files(files, output)
    except MergeError as exc:
        err_console.print(f"[merge] {exc}", style="bold red", markup=False)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
