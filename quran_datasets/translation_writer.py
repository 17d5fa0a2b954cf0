# quran_datasets/translation_writer.py
import json
from pathlib import Path
from typing import Dict, List, Optional, Union

from colorama import Fore

from .csv_writer import PARALLEL_FIELDS, VERSE_FIELDS, write_csv
from .models import AyahEntry, TranslationDocument, TranslationInfo, Verse
from .utils import ensure_dir, safe_path_part, surah_filename


class TranslationOutput:
    """Everything produced for one translation that outlives its directory writes."""

    def __init__(self, info: TranslationInfo, records: List[dict], document: TranslationDocument):
        self.info = info
        self.records = records
        self.document = document

    @property
    def ayah_count(self) -> int:
        return len(self.records)


def translation_dir(datasets_dir: Union[str, Path], info: TranslationInfo) -> Path:
    """datasets/{language}/{translation_key}"""
    return Path(datasets_dir) / safe_path_part(info.language_code) / safe_path_part(info.key)


def group_by_surah(rows: List[dict]) -> Dict[int, List[dict]]:
    """Group verse rows by surah, keeping first-seen surah order and row order."""
    groups: Dict[int, List[dict]] = {}
    for row in rows:
        groups.setdefault(row["surah"], []).append(row)
    return groups


def build_document(info: TranslationInfo, rows: List[dict]) -> TranslationDocument:
    surahs: Dict[str, List[AyahEntry]] = {}
    for row in rows:
        surahs.setdefault(str(row["surah"]), []).append(AyahEntry(
            ayah=row["ayah"],
            arabic_text=row["arabic_text"],
            translation=row["translation"],
            footnotes=row["footnotes"],
        ))
    return TranslationDocument(
        translation_key=info.key,
        language_code=info.language_code,
        translation_title=info.title,
        translation_version=info.version,
        surahs=surahs,
    )


def enrich_rows(info: TranslationInfo, rows: List[dict]) -> List[dict]:
    """Verse rows plus the translation columns used by all_translations.csv."""
    return [
        {
            "translation_key": info.key,
            "language_code": info.language_code,
            "translation_title": info.title,
            "translation_version": info.version,
            **row,
        }
        for row in rows
    ]


def write_translation(datasets_dir: Union[str, Path], info: TranslationInfo,
                      verses: List[Verse]) -> Optional[TranslationOutput]:
    """
    Write the per-translation artifacts for one fetched translation.

    Produces metadata.json, full_translation.csv, parallel_corpus.csv and one
    surah_NNN.csv per surah present under datasets/{language}/{key}. Returns
    None (and writes nothing) if no verses were fetched. Filesystem errors
    propagate to the caller.
    """
    if not verses:
        print(Fore.YELLOW + f"⚠ No data found for translation {info.key}")
        return None

    rows = [verse.row() for verse in verses]
    target = ensure_dir(translation_dir(datasets_dir, info))

    with open(target / "metadata.json", 'w', encoding='utf-8') as f:
        json.dump(info.metadata(), f, ensure_ascii=False, indent=2)

    write_csv(target / "full_translation.csv", rows, VERSE_FIELDS)

    for surah_number, surah_rows in group_by_surah(rows).items():
        write_csv(target / surah_filename(surah_number), surah_rows, VERSE_FIELDS)

    parallel = (
        {
            "surah": row["surah"],
            "ayah": row["ayah"],
            "arabic": row["arabic_text"],
            "translation": row["translation"],
        }
        for row in rows
    )
    write_csv(target / "parallel_corpus.csv", parallel, PARALLEL_FIELDS)

    return TranslationOutput(info, enrich_rows(info, rows), build_document(info, rows))
