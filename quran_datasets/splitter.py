# quran_datasets/splitter.py
import json
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from colorama import Fore, Style
from pydantic import ValidationError

from .csv_writer import CONSOLIDATED_FIELDS, ChunkedCSVWriter, write_csv
from .json_stream import read_json_array
from .models import ConsolidatedDocument
from .settings import Settings
from .utils import ensure_dir, safe_path_part

REQUIRED_FIELDS = ("translation_key", "language_code", "surahs")
DEFAULT_VERSION = "default"

SPLIT_STRUCTURE = """
📂 New Dataset Structure:
datasets/
├── translations_index.json              # Metadata about all translations
└── {language_code}/                     # Folder for each language
    ├── full_language_translations.json  # All translations for this language (JSON)
    ├── full_language_translations.csv   # All translations for this language (CSV)
    ├── version_*.json                   # All translations for a specific version (JSON)
    ├── version_*.csv                    # All translations for a specific version (CSV)
    └── {translation_key}/               # Folder for each translation
        ├── full_translation.json        # Individual translation file (JSON)
        └── full_translation_flat.csv    # Individual translation file (CSV)"""


def flatten_translation(document: Mapping) -> List[dict]:
    """
    Flatten a translation document into verse rows.

    Surahs are visited in the mapping's own key order and ayahs in stored
    order; nothing is re-sorted.
    """
    rows = []
    translation_key = document.get("translation_key")
    language_code = document.get("language_code")
    translation_title = document.get("translation_title")
    translation_version = document.get("translation_version") or ""

    for surah_number, ayahs in (document.get("surahs") or {}).items():
        for ayah in ayahs or []:
            rows.append({
                "translation_key": translation_key,
                "language_code": language_code,
                "translation_title": translation_title,
                "translation_version": translation_version,
                "surah": surah_number,
                "ayah": ayah.get("ayah"),
                "arabic_text": ayah.get("arabic_text"),
                "translation": ayah.get("translation"),
                "footnotes": ayah.get("footnotes") or "",
            })
    return rows


def iter_flattened(documents: Iterable[Mapping]) -> Iterator[dict]:
    for document in documents:
        yield from flatten_translation(document)


def version_of(document: Mapping) -> str:
    return str(document.get("translation_version") or DEFAULT_VERSION)


def document_problem(document: Mapping) -> Optional[str]:
    """Why `document` can't be regrouped, or None if it can."""
    missing = [field for field in REQUIRED_FIELDS if field not in document]
    if missing:
        return f"missing {', '.join(missing)}"
    try:
        ConsolidatedDocument.model_validate(document)
    except ValidationError as e:
        return "; ".join(f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                         for error in e.errors()[:3])
    return None


def describe(document: Mapping) -> str:
    key = document.get("translation_key")
    return repr(key) if key is not None else "without key"


class TranslationSplitter:
    """
    Stage 2: regroup all_translations.json by language and by (language, version).

    The consolidated file is streamed once. Each document is rewritten into
    its own translation directory and indexed in memory; the combined
    language and version files are written after the stream ends.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self.datasets_dir = Path(self.settings.datasets_dir)
        self.source_file = self.datasets_dir / "all_translations.json"

    def write_translation_files(self, document: Mapping) -> bool:
        """Write full_translation.json/.csv into an existing translation directory."""
        target = (self.datasets_dir / safe_path_part(document["language_code"])
                  / safe_path_part(document["translation_key"]))
        if not target.is_dir():
            print(Fore.YELLOW + f"Directory not found for {document['translation_key']}, skipping individual file")
            return False

        with open(target / "full_translation.json", 'w', encoding='utf-8') as f:
            json.dump(document, f, ensure_ascii=False, indent=2)

        rows = flatten_translation(document)
        if rows:
            write_csv(target / "full_translation_flat.csv", rows, CONSOLIDATED_FIELDS)
        return True

    def write_group(self, language: str, stem: str, documents: List[dict]):
        """Write {stem}.json and a chunked {stem}.csv into the language directory."""
        language_dir = ensure_dir(self.datasets_dir / safe_path_part(language))

        with open(language_dir / f"{stem}.json", 'w', encoding='utf-8') as f:
            json.dump(documents, f, ensure_ascii=False, indent=2)

        writer = ChunkedCSVWriter(language_dir / f"{stem}.csv", CONSOLIDATED_FIELDS,
                                  chunk_size=self.settings.split_csv_chunk_size)
        rows = writer.write(iter_flattened(documents))
        print(Fore.WHITE + f"  Saved {stem} for {language}: {len(documents)} translations, {rows} rows")

    def save_group(self, language: str, stem: str, documents: List[dict]) -> bool:
        try:
            self.write_group(language, stem, documents)
            return True
        except Exception as e:
            print(Fore.RED + f"❌ Error saving {stem} for {language}: {e}")
            return False

    def run(self) -> Optional[Dict[str, int]]:
        print(Style.BRIGHT + Fore.CYAN + "Starting translation file splitter")
        if not self.source_file.exists():
            print(Fore.RED + f"❌ Error: {self.source_file.name} file not found in the {self.datasets_dir} directory")
            return None

        languages: Dict[str, List[dict]] = {}
        versions: Dict[Tuple[str, str], List[dict]] = {}
        translation_count = 0

        for document in read_json_array(self.source_file, chunk_size=self.settings.read_chunk_size,
                                        strict=self.settings.strict_json):
            problem = document_problem(document)
            if problem:
                print(Fore.YELLOW + f"⚠ Skipping translation {describe(document)}: {problem}")
                continue

            translation_count += 1
            if translation_count % 10 == 0:
                print(Fore.WHITE + f"Processed {translation_count} translations")

            language = document["language_code"]
            languages.setdefault(language, []).append(document)
            versions.setdefault((language, version_of(document)), []).append(document)

            try:
                self.write_translation_files(document)
            except Exception as e:
                print(Fore.RED + f"❌ Error writing files for {document['translation_key']}: {e}")

        print(Fore.WHITE + f"Total translations processed: {translation_count}")

        print(Fore.CYAN + "Saving language files...")
        for language, documents in languages.items():
            self.save_group(language, "full_language_translations", documents)

        print(Fore.CYAN + "Saving version files...")
        for (language, version), documents in versions.items():
            self.save_group(language, f"version_{safe_path_part(version)}_translations", documents)

        print(Fore.CYAN + "Saving version files...")
        for (language, version), documents in versions.items():
            self.write_group(language, f"version_{safe_path_part(version)}_translations", documents)

        index = {
            "total_translations": translation_count,
            "languages": [
                {
                    "code": language,
                    "translation_count": len(documents),
                    "versions": [version for (lang, version) in versions if lang == language],
                }
                for language, documents in languages.items()
            ],
        }
        with open(self.datasets_dir / "translations_index.json", 'w', encoding='utf-8') as f:
            json.dump(index, f, ensure_ascii=False, indent=2)

        stats = {
            "translation_count": translation_count,
            "language_count": len(languages),
            "version_count": len(versions),
        }
        print(Fore.GREEN + "\n✓ Translation splitting complete!")
        print(Fore.GREEN + f"📊 Successfully processed {stats['translation_count']} translations")
        print(Fore.GREEN + f"🌐 Split into {stats['language_count']} language files")
        print(Fore.GREEN + f"📚 Created {stats['version_count']} version-specific files")
        print(Fore.WHITE + SPLIT_STRUCTURE)
        return stats
