# quran_datasets/quranenc_client.py
import json
import time
from typing import Callable, List, Optional

import requests
from colorama import Fore
from pydantic import ValidationError

from .models import LanguageInfo, TranslationInfo, Verse
from .settings import Settings
from .version import VERSION


class QuranAPIError(Exception):
    """Base exception for Quran API errors"""


class QuranEncClient:
    """
    Sequential client for the QuranEnc translations API.

    Only one request is ever outstanding. Between surah requests the client
    sleeps for `request_delay` seconds, or `error_delay` after a failure, so
    the remote source is not overwhelmed.
    """
    BASE_URL = "https://quranenc.com/api/v1"
    TIMEOUT = 30
    TOTAL_SURAHS = 114

    def __init__(self, settings: Optional[Settings] = None, session=None,
                 sleep: Callable[[float], None] = time.sleep):
        self.settings = settings or Settings()
        self.base_url = (self.settings.base_url or self.BASE_URL).rstrip('/')
        self.timeout = self.settings.request_timeout or self.TIMEOUT
        self.total_surahs = self.settings.total_surahs or self.TOTAL_SURAHS
        self.session = session if session is not None else requests.Session()
        self.session.headers.update({"User-Agent": f"QuranDatasets/{VERSION}"})
        self._sleep = sleep

    def _handle_response(self, response: requests.Response) -> dict:
        """Handle API response and return JSON data"""
        try:
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            raise QuranAPIError(f"Request failed: {e}")
        except (json.JSONDecodeError, ValueError) as e:
            raise QuranAPIError(f"Invalid JSON response: {e}")

    def _get(self, endpoint: str) -> dict:
        url = f"{self.base_url}{endpoint}"
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise QuranAPIError(f"Request to {endpoint} failed: {e}")
        data = self._handle_response(response)
        if not isinstance(data, dict):
            raise QuranAPIError(f"Unexpected response from {endpoint}: expected an object")
        return data

    # --- Catalog ---

    def get_translations(self) -> List[TranslationInfo]:
        """Fetch the full translation catalog. Any failure raises QuranAPIError."""
        data = self._get("/translations/list")
        entries = data.get("translations")
        if not isinstance(entries, list):
            raise QuranAPIError("Catalog response has no 'translations' list")
        try:
            return [TranslationInfo.model_validate(entry) for entry in entries]
        except ValidationError as e:
            raise QuranAPIError(f"Malformed translation catalog entry: {e}")

    def get_languages(self) -> List[LanguageInfo]:
        """Fetch the list of supported languages. Any failure raises QuranAPIError."""
        data = self._get("/translations/languages")
        entries = data.get("languages")
        if not isinstance(entries, list):
            raise QuranAPIError("Languages response has no 'languages' list")
        try:
            return [LanguageInfo.model_validate(entry) for entry in entries]
        except ValidationError as e:
            raise QuranAPIError(f"Malformed language entry: {e}")

    # --- Verses ---

    def get_surah(self, translation_key: str, surah_number: int) -> List[Verse]:
        """Fetch one surah of one translation."""
        data = self._get(f"/translation/sura/{translation_key}/{surah_number}")
        result = data.get("result")
        if not isinstance(result, list):
            raise QuranAPIError(f"No 'result' list for surah {surah_number}")
        try:
            return [Verse.model_validate(item) for item in result]
        except ValidationError as e:
            raise QuranAPIError(f"Malformed verse in surah {surah_number}: {e}")

    def get_translation_verses(self, translation_key: str) -> List[Verse]:
        """
        Fetch every surah of a translation in ascending order.

        A surah that fails is reported and contributes no verses; the loop
        always moves on to the next surah number.
        """
        verses: List[Verse] = []
        for surah_number in range(1, self.total_surahs + 1):
            try:
                if self.settings.verbose:
                    print(Fore.CYAN + f"Fetching surah {surah_number} for translation {translation_key}...")
                verses.extend(self.get_surah(translation_key, surah_number))
                self._sleep(self.settings.request_delay)
            except QuranAPIError as e:
                print(Fore.RED + f"❌ Error fetching surah {surah_number} for {translation_key}: {e}")
                self._sleep(self.settings.error_delay)
        return verses
