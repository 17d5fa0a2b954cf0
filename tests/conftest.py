import json
import sys
from pathlib import Path

import pytest
import requests

sys.path.insert(0, str(Path(__file__).parent.parent))

from quran_datasets.quranenc_client import QuranEncClient
from quran_datasets.settings import Settings

BASE_URL = "https://api.test/v1"


class FakeResponse:
    def __init__(self, payload=None, status_code=200, text=None):
        self.payload = payload
        self.status_code = status_code
        self.text = text

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Server Error", response=self)

    def json(self):
        if self.text is not None:
            return json.loads(self.text)
        return self.payload


class FakeQuranEnc:
    """
    In-memory stand-in for the QuranEnc API, used as the client's session.

    `verses` maps translation key -> surah number -> list of API verse dicts.
    `failing` holds (key, surah) pairs that answer with HTTP 500.
    """

    def __init__(self, catalog, verses=None, failing=(), languages=None):
        self.headers = {}
        self.catalog = catalog
        self.verses = verses or {}
        self.failing = set(failing)
        self.languages = languages if languages is not None else [
            {"language_iso_code": "en", "name": "English"},
        ]
        self.calls = []
        self.catalog_status = 200

    def get(self, url, timeout=None):
        path = url[len(BASE_URL):]
        self.calls.append(path)
        if path == "/translations/list":
            return FakeResponse({"translations": self.catalog}, status_code=self.catalog_status)
        if path == "/translations/languages":
            return FakeResponse({"languages": self.languages})
        _, _, key, surah = path.strip("/").split("/")
        if (key, int(surah)) in self.failing:
            return FakeResponse(status_code=500)
        return FakeResponse({"result": self.verses.get(key, {}).get(int(surah), [])})


def catalog_entry(key, language="en", version="1.0", title=None):
    return {
        "key": key,
        "direction": "ltr",
        "language_iso_code": language,
        "version": version,
        "last_update": 1700000000,
        "title": title or f"Translation {key}",
        "description": f"Description of {key}",
    }


def api_verse(surah, ayah, translation=None, footnotes=""):
    return {
        "id": f"{surah}-{ayah}",
        "sura": str(surah),
        "aya": str(ayah),
        "arabic_text": "بِسْمِ اللَّهِ",
        "translation": translation or f"Verse {surah}:{ayah}",
        "footnotes": footnotes,
    }


@pytest.fixture
def settings(tmp_path):
    return Settings(
        base_url=BASE_URL,
        datasets_dir=str(tmp_path / "datasets"),
        request_delay=0.3,
        error_delay=1.0,
    )


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def make_client(settings, sleeps):
    def factory(api):
        return QuranEncClient(settings, session=api, sleep=sleeps.append)
    return factory
