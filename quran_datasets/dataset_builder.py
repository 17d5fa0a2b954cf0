# quran_datasets/dataset_builder.py
import json
from pathlib import Path
from typing import List, Optional, Tuple

import tqdm
from colorama import Fore, Style

from .buffers import FlushBuffer
from .csv_writer import CONSOLIDATED_FIELDS, ChunkedCSVWriter
from .json_stream import JsonArrayWriter
from .models import ProcessingProgress, ProcessingSummary, TranslationInfo, TranslationResult
from .quranenc_client import QuranEncClient
from .settings import Settings
from .translation_writer import TranslationOutput, write_translation
from .utils import ensure_dir

DATASET_STRUCTURE = """
📂 Dataset Structure:
datasets/
├── translations_list.json       # List of all available translations
├── languages_list.json          # List of all available languages
├── processing_summary.json      # Summary of processed translations
├── all_translations.csv         # Consolidated CSV with all translations
├── all_translations.json        # Consolidated JSON with all translations
└── {language_code}/             # Folder for each language
    └── {translation_key}/       # Folder for each translation
        ├── metadata.json        # Translation metadata
        ├── full_translation.csv # Complete translation
        ├── parallel_corpus.csv  # Arabic text with translation
        └── surah_*.csv          # Individual surah files"""


def _dump_json(path: Path, data):
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2)


class DatasetBuilder:
    """
    Stage 1: fetch every catalog translation and persist it.

    Translations are handled one at a time in catalog order. Verse rows and
    translation documents are held in bounded buffers and appended to
    all_translations.csv / all_translations.json whenever a buffer passes
    its threshold, and once more after the last translation.
    """

    def __init__(self, settings: Optional[Settings] = None, client: Optional[QuranEncClient] = None):
        self.settings = settings or Settings()
        self.client = client or QuranEncClient(self.settings)
        self.datasets_dir = Path(self.settings.datasets_dir)

    def process_translation(self, info: TranslationInfo) -> Tuple[Optional[TranslationResult], Optional[TranslationOutput]]:
        """
        Fetch and write one translation.

        Returns (None, None) when nothing was fetched, and a result carrying
        `error` when writing failed; neither stops the run.
        """
        print(Fore.CYAN + f"\nProcessing translation: {info.title} ({info.key})")
        try:
            verses = self.client.get_translation_verses(info.key)
            output = write_translation(self.datasets_dir, info, verses)
            if output is None:
                return None, None
            print(Fore.GREEN + f"✓ Successfully processed translation: {info.key}")
            return TranslationResult(key=info.key, language=info.language_code,
                                     ayah_count=output.ayah_count), output
        except Exception as e:
            print(Fore.RED + f"❌ Error processing translation {info.key}: {e}")
            return TranslationResult(key=info.key, language=info.language_code, error=str(e)), None

    def save_progress(self, progress: ProcessingProgress):
        _dump_json(self.datasets_dir / "processing_progress.json", progress.model_dump())

    def flush(self, buffer: FlushBuffer, final: bool, filename: str) -> bool:
        """Flush `buffer` into its consolidated file; a failed write is reported, not raised."""
        try:
            buffer.flush(final=final)
            return True
        except OSError as e:
            print(Fore.RED + f"❌ Error writing {filename}: {e}")
            return False

    def run(self) -> ProcessingSummary:
        """Run the whole stage. QuranAPIError from the catalog requests propagates."""
        settings = self.settings
        print(Style.BRIGHT + Fore.CYAN + "🔄 Starting Quran Translation Dataset Generator")
        ensure_dir(self.datasets_dir)

        print(Fore.CYAN + "📚 Fetching available translations...")
        translations = self.client.get_translations()
        print(Fore.WHITE + f"Found {len(translations)} translations")

        print(Fore.CYAN + "🌐 Fetching available languages...")
        languages = self.client.get_languages()
        print(Fore.WHITE + f"Found {len(languages)} languages")

        _dump_json(self.datasets_dir / "translations_list.json", [t.metadata() for t in translations])
        _dump_json(self.datasets_dir / "languages_list.json",
                   [language.model_dump(exclude_unset=True) for language in languages])

        to_process = translations[:settings.limit] if settings.limit else translations
        total = len(to_process)
        print(Fore.WHITE + f"Will process {total} translations")

        csv_writer = ChunkedCSVWriter(self.datasets_dir / "all_translations.csv", CONSOLIDATED_FIELDS,
                                      chunk_size=settings.csv_chunk_size, label="all_translations.csv")
        json_writer = JsonArrayWriter(self.datasets_dir / "all_translations.json")
        row_buffer: FlushBuffer[dict] = FlushBuffer(
            settings.csv_flush_threshold, lambda rows, final: csv_writer.write(rows))
        document_buffer: FlushBuffer[dict] = FlushBuffer(
            settings.json_flush_threshold, lambda docs, final: json_writer.write(docs, final=final))

        results: List[TranslationResult] = []
        success_count = 0
        error_count = 0
        write_errors = 0

        with tqdm.tqdm(total=total, desc=Fore.RED + "Progress" + Fore.RESET,
                       unit="translation", colour='red') as pbar:
            for i, info in enumerate(to_process):
                is_last = i == total - 1
                result, output = self.process_translation(info)

                if result is not None:
                    results.append(result)
                if output is not None:
                    row_buffer.extend(output.records)
                    document_buffer.add(output.document.to_json_dict())
                    success_count += 1
                else:
                    error_count += 1

                if i % max(1, settings.progress_every) == 0 or is_last:
                    self.save_progress(ProcessingProgress(
                        total=total,
                        processed=i + 1,
                        success=success_count,
                        error=error_count,
                        last_processed=info.key,
                    ))

                if row_buffer.full or is_last:
                    print(Fore.CYAN + f"\n📊 {'Updating' if csv_writer.started else 'Creating'} consolidated CSV file...")
                    if not self.flush(row_buffer, is_last, "all_translations.csv"):
                        write_errors += 1
                if document_buffer.full or is_last:
                    print(Fore.CYAN + f"📊 {'Updating' if json_writer.started else 'Creating'} consolidated JSON file...")
                    if not self.flush(document_buffer, is_last, "all_translations.json"):
                        write_errors += 1

                pbar.update(1)

        # An empty catalog never reaches the last-translation flush
        if not csv_writer.started:
            if not self.flush(row_buffer, True, "all_translations.csv"):
                write_errors += 1
        if not json_writer.closed:
            if not self.flush(document_buffer, True, "all_translations.json"):
                write_errors += 1

        summary = ProcessingSummary(total=total, success=success_count, error=error_count,
                                    write_errors=write_errors, results=results)
        _dump_json(self.datasets_dir / "processing_summary.json", {
            "total": summary.total,
            "success": summary.success,
            "error": summary.error,
            "write_errors": summary.write_errors,
            "results": [r.model_dump(exclude_none=True) for r in summary.results],
        })

        print(Fore.GREEN + "\n✓ Dataset generation complete!")
        print(Fore.GREEN + f"📊 Successfully processed {success_count} translations")
        print(Fore.YELLOW + f"⚠ Encountered errors in {error_count} translations")
        if write_errors:
            print(Fore.RED + f"❌ {write_errors} consolidated file writes failed")
        print(Fore.WHITE + f"📁 Data saved in the '{self.datasets_dir}' directory")
        print(Fore.WHITE + DATASET_STRUCTURE)
        return summary
