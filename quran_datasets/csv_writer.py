# quran_datasets/csv_writer.py
import io
from itertools import islice
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from colorama import Fore

VERSE_FIELDS = ["surah", "ayah", "arabic_text", "translation", "footnotes"]
PARALLEL_FIELDS = ["surah", "ayah", "arabic", "translation"]
CONSOLIDATED_FIELDS = [
    "translation_key",
    "language_code",
    "translation_title",
    "translation_version",
    "surah",
    "ayah",
    "arabic_text",
    "translation",
    "footnotes",
]


def escape_field(value) -> str:
    """Quote a value if it contains a comma, newline or quote; inner quotes are doubled."""
    text = "" if value is None else str(value)
    if ',' in text or '\n' in text or '"' in text:
        return '"' + text.replace('"', '""') + '"'
    return text


def format_row(row: dict, fieldnames: Sequence[str]) -> str:
    """One CSV line, newline included, with fields in `fieldnames` order."""
    return ",".join(escape_field(row.get(name)) for name in fieldnames) + "\n"


def rows_to_csv(rows: Iterable[dict], fieldnames: Sequence[str], include_header: bool = True) -> str:
    """Render rows as CSV text. Missing keys and None values become empty fields."""
    buffer = io.StringIO()
    if include_header:
        buffer.write(",".join(fieldnames) + "\n")
    for row in rows:
        buffer.write(format_row(row, fieldnames))
    return buffer.getvalue()


def write_csv(path: Union[str, Path], rows: Iterable[dict], fieldnames: Sequence[str]) -> int:
    """Write a complete CSV file (header + rows). Returns the number of data rows."""
    count = 0
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(",".join(fieldnames) + "\n")
        for row in rows:
            f.write(format_row(row, fieldnames))
            count += 1
    return count


def _chunks(rows: Iterable[dict], size: int):
    iterator = iter(rows)
    while True:
        chunk = list(islice(iterator, size))
        if not chunk:
            return
        yield chunk


class ChunkedCSVWriter:
    """
    Grows one CSV file across many flushes.

    The first call to `write()` truncates the file and writes the header;
    later calls append data rows only. Rows are rendered and written in
    sub-chunks of `chunk_size` so no single huge string is built.
    """

    def __init__(self, path: Union[str, Path], fieldnames: Sequence[str],
                 chunk_size: int = 1000, label: Optional[str] = None):
        self.path = Path(path)
        self.fieldnames: List[str] = list(fieldnames)
        self.chunk_size = max(1, chunk_size)
        self.label = label
        self.started = False
        self.rows_written = 0

    def write(self, rows: Iterable[dict]) -> int:
        """Append rows (writing the header first on the first call). Returns rows written."""
        mode = 'a' if self.started else 'w'
        written = 0
        with open(self.path, mode, encoding='utf-8', newline='') as f:
            if not self.started:
                f.write(rows_to_csv([], self.fieldnames, include_header=True))
                self.started = True
            for chunk in _chunks(rows, self.chunk_size):
                f.write(rows_to_csv(chunk, self.fieldnames, include_header=False))
                written += len(chunk)
                if self.label:
                    print(Fore.WHITE + f"  Saved chunk of {len(chunk)} rows to {self.label}")
        self.rows_written += written
        return written
