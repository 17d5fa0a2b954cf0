# quran_datasets/utils.py
import os
import re
from pathlib import Path
from typing import Union

# Characters that cannot appear in a single path component on any supported platform
_UNSAFE_PATH_CHARS = re.compile(r'[\\/:*?"<>|]')


def ensure_dir(dir_path: Union[str, os.PathLike]) -> Path:
    """Create the directory (and parents) if needed and return it as a Path."""
    path = Path(dir_path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def surah_filename(surah_number: Union[int, str]) -> str:
    """File name for a single surah CSV, e.g. 7 -> 'surah_007.csv'."""
    return f"surah_{str(surah_number).zfill(3)}.csv"


def safe_path_part(value) -> str:
    """
    Make a catalog value usable as one path component.

    Language codes, translation keys and versions come straight from the remote
    catalog, so anything that would create a nested path is replaced with '-'.
    """
    text = str(value).strip() if value is not None else ""
    text = _UNSAFE_PATH_CHARS.sub("-", text)
    return text or "default"


def one_line(text) -> str:
    """Collapse embedded newlines to single spaces (None becomes '')."""
    if not text:
        return ""
    return str(text).replace("\r\n", " ").replace("\n", " ")
