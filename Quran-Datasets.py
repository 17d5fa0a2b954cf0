# Quran-Datasets.py
import sys

from quran_datasets.cli import main

if __name__ == "__main__":
    sys.exit(main())
