# quran_datasets/cli.py
import argparse
import sys
from typing import List, Optional

from colorama import Fore, Style, init

from .dataset_builder import DatasetBuilder
from .json_stream import JsonStreamError
from .quranenc_client import QuranAPIError
from .settings import load_settings
from .splitter import TranslationSplitter
from .version import VERSION


def positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a number of at least 1, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quran-datasets",
        description="Build multilingual Quran translation datasets from the QuranEnc API.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--settings", help="Path to a JSON settings file")
    common.add_argument("--datasets-dir", dest="datasets_dir", help="Output directory (default: datasets)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    fetch = subparsers.add_parser("fetch", parents=[common], help="Fetch all translations and write the datasets")
    fetch.add_argument("--base-url", dest="base_url", help="QuranEnc API base URL")
    fetch.add_argument("--limit", type=positive_int, help="Only process the first N translations")
    fetch.add_argument("--delay", dest="request_delay", type=float, help="Seconds to wait between surah requests")
    fetch.add_argument("--verbose", action="store_true", default=None, help="Report every surah request")

    split = subparsers.add_parser("split", parents=[common], help="Split all_translations.json by language and version")
    split.add_argument("--strict", dest="strict_json", action="store_true", default=None,
                       help="Fail if all_translations.json is truncated")
    split.add_argument("--chunk-size", dest="read_chunk_size", type=int, help="Read chunk size in bytes")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    init(autoreset=True)
    args = build_parser().parse_args(argv)
    overrides = {key: value for key, value in vars(args).items() if key not in ("command", "settings")}
    settings = load_settings(args.settings, overrides)

    try:
        if args.command == "fetch":
            summary = DatasetBuilder(settings).run()
            return 0 if (summary.success or not summary.total) and not summary.write_errors else 1
        stats = TranslationSplitter(settings).run()
        return 0 if stats is not None else 1
    except QuranAPIError as e:
        print(Fore.RED + Style.BRIGHT + f"❌ Error in main process: {e}")
        return 1
    except JsonStreamError as e:
        print(Fore.RED + Style.BRIGHT + f"❌ {e}")
        return 1
    except KeyboardInterrupt:
        print(Style.BRIGHT + Fore.YELLOW + "\n⚠ Interrupted.")
        return 130


def fetch_main() -> int:
    return main(["fetch"] + sys.argv[1:])


def split_main() -> int:
    return main(["split"] + sys.argv[1:])
