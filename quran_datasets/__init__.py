# quran_datasets/__init__.py
from .version import VERSION

__all__ = ["VERSION"]
