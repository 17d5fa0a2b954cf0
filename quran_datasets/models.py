# quran_datasets/models.py
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .utils import one_line


class TranslationInfo(BaseModel):
    """One entry of /translations/list. Unknown fields are kept so metadata.json stays as fetched."""
    model_config = ConfigDict(extra="allow", populate_by_name=True, coerce_numbers_to_str=True)

    key: str
    language_code: str = Field(alias="language_iso_code")
    title: str = ""
    version: Optional[str] = None
    direction: Optional[str] = None   # "ltr" or "rtl"
    last_update: Optional[Union[int, str]] = None
    description: Optional[str] = None

    def metadata(self) -> dict:
        """The catalog entry as the API returned it."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class LanguageInfo(BaseModel):
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    language_iso_code: str
    name: Optional[str] = None


class Verse(BaseModel):
    """A single verse as returned by /translation/sura/{key}/{surah}."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)

    surah: int = Field(alias="sura")
    ayah: int = Field(alias="aya")
    arabic_text: str = ""
    translation: str
    footnotes: Optional[str] = None

    def row(self) -> dict:
        """Verse-level CSV row (surah,ayah,arabic_text,translation,footnotes)."""
        return {
            "surah": self.surah,
            "ayah": self.ayah,
            "arabic_text": self.arabic_text,
            "translation": one_line(self.translation),
            "footnotes": one_line(self.footnotes),
        }


class AyahEntry(BaseModel):
    ayah: int
    arabic_text: str
    translation: str
    footnotes: str = ""


class TranslationDocument(BaseModel):
    """Hierarchical form of one translation; the unit stored in all_translations.json."""
    translation_key: str
    language_code: str
    translation_title: str
    translation_version: Optional[str] = None
    surahs: Dict[str, List[AyahEntry]] = Field(default_factory=dict)

    def to_json_dict(self) -> dict:
        return self.model_dump()


class ConsolidatedDocument(BaseModel):
    """Shape of a document read back from all_translations.json; fields beyond these are left alone."""
    model_config = ConfigDict(extra="allow")

    translation_key: str
    language_code: str
    translation_version: Optional[Union[str, int, float]] = None
    surahs: Dict[str, List[Dict[str, Any]]]


class TranslationResult(BaseModel):
    """Outcome of processing one catalog entry, as recorded in processing_summary.json."""
    key: str
    language: str
    ayah_count: Optional[int] = None
    error: Optional[str] = None


class ProcessingProgress(BaseModel):
    total: int
    processed: int
    success: int
    error: int
    last_processed: str


class ProcessingSummary(BaseModel):
    total: int
    success: int
    error: int
    write_errors: int = 0
    results: List[TranslationResult] = Field(default_factory=list)
