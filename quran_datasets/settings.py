# quran_datasets/settings.py
import json
import os
from typing import Any, Dict, Optional

import platformdirs
from colorama import Fore
from pydantic import BaseModel, Field, ValidationError

# --- Constants for platformdirs ---
APP_NAME = "QuranDatasets"
APP_AUTHOR = "FadSecLab"
SETTINGS_FILENAME = "QuranDatasets-Settings.json"


class Settings(BaseModel):
    """Run configuration shared by the fetch and split stages."""
    base_url: str = "https://quranenc.com/api/v1"
    datasets_dir: str = "datasets"
    request_timeout: float = 30.0
    request_delay: float = 0.3        # seconds between surah requests
    error_delay: float = 1.0          # seconds after a failed surah request
    csv_flush_threshold: int = 10000  # verse rows buffered before appending to all_translations.csv
    json_flush_threshold: int = 20    # documents buffered before appending to all_translations.json
    csv_chunk_size: int = 1000
    split_csv_chunk_size: int = 10000
    read_chunk_size: int = 1024 * 1024
    progress_every: int = 5
    total_surahs: int = 114
    strict_json: bool = False
    verbose: bool = False
    limit: Optional[int] = Field(None, ge=1)


def default_settings_path() -> Optional[str]:
    """Location of the optional settings file, or None if it can't be determined."""
    try:
        config_dir = platformdirs.user_config_dir(APP_NAME, APP_AUTHOR)
        return os.path.join(config_dir, SETTINGS_FILENAME)
    except Exception as e_path:
        print(f"{Fore.YELLOW}⚠ Could not determine settings path: {e_path}")
        return None


def load_settings(settings_file: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None) -> Settings:
    """
    Build the run settings.

    Values come from the defaults, then the JSON settings file (if present),
    then `overrides` (CLI flags). Overrides set to None are ignored so that
    unset flags never clobber file values.
    """
    values: Dict[str, Any] = {}

    path = settings_file or default_settings_path()
    if path and os.path.exists(path):
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if isinstance(data, dict):
                values.update(data)
            else:
                print(Fore.YELLOW + f"⚠ Settings file '{path}' is not a JSON object, ignoring.")
        except json.JSONDecodeError:
            print(Fore.YELLOW + f"⚠ Settings file '{path}' is corrupted, using defaults.")
        except OSError as e:
            print(Fore.RED + f"❌ Error reading settings from '{path}': {e}")
    elif settings_file:
        print(Fore.YELLOW + f"⚠ Settings file '{settings_file}' not found, using defaults.")

    if overrides:
        values.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return Settings(**values)
    except ValidationError as e:
        print(Fore.YELLOW + f"⚠ Invalid settings ({e.error_count()} errors), using defaults for the rest.")
        # Keep only the fields that validate on their own
        valid = {}
        for key, value in values.items():
            if key not in Settings.model_fields:
                continue
            try:
                Settings(**{key: value})
                valid[key] = value
            except ValidationError:
                print(Fore.YELLOW + f"  • dropped '{key}': {value!r}")
        return Settings(**valid)
