"""
Reference caption store.
Loads the client's example captions from a CSV file so the prompt composer can
show them to the model as style examples.
"""
import csv
import logging
from typing import List, Optional

from caption_studio.cache import TTLCache

logger = logging.getLogger(__name__)

# Column names checked in priority order; the first non-empty one wins
CAPTION_FIELDS = ('caption', 'text', 'content')


def load_captions_from_csv(file_path: str) -> List[str]:
    """
    Load reference captions from a CSV file with a header row.

    Args:
        file_path: Path to the CSV file.

    Returns:
        Captions in file order. Rows with no caption/text/content value are skipped.

    Raises:
        OSError: If the file cannot be opened or read.
        UnicodeDecodeError: If the file is not UTF-8 encoded.
        csv.Error: If the file is not parseable as CSV.
    """
    captions = []

    try:
        # utf-8-sig strips the BOM that spreadsheet exports prepend
        with open(file_path, newline='', encoding='utf-8-sig') as f:
            for row in csv.DictReader(f):
                caption_text = ''
                for field in CAPTION_FIELDS:
                    value = row.get(field)
                    if value:
                        caption_text = value
                        break
                if caption_text:
                    captions.append(caption_text)
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        logger.error(f"Error loading captions from {file_path}: {e}")
        raise

    logger.info(f"Loaded {len(captions)} captions from CSV file")
    return captions


class ReferenceStore:
    """Source of reference captions for one generation request."""

    def load_references(self) -> List[str]:
        raise NotImplementedError


class CsvReferenceStore(ReferenceStore):
    """
    Reads the CSV from disk on every call so edits to the file show up immediately.
    """

    def __init__(self, file_path: str):
        self.file_path = file_path

    def load_references(self) -> List[str]:
        return load_captions_from_csv(self.file_path)

    def __repr__(self):
        return f"CsvReferenceStore({self.file_path!r})"


class CachingReferenceStore(ReferenceStore):
    """
    Wraps another store and keeps its result for ttl seconds.
    Load failures are not cached.
    """

    def __init__(self, inner: ReferenceStore, ttl: int, cache: Optional[TTLCache] = None):
        self.inner = inner
        self.ttl = ttl
        self.cache = cache if cache is not None else TTLCache()
        self._key = repr(inner)

    def load_references(self) -> List[str]:
        cached = self.cache.get(self._key)
        if cached is not None:
            logger.debug(f"Reference cache hit: {self._key}")
            return list(cached)

        captions = self.inner.load_references()
        self.cache.set(self._key, tuple(captions), ttl=self.ttl)
        return captions


def build_reference_store(file_path: str, cache_ttl: int = 0) -> ReferenceStore:
    """
    Create the reference store for the configured CSV path.

    Args:
        file_path: Path to the reference CSV.
        cache_ttl: Seconds to cache parsed captions; 0 disables caching.
    """
    store = CsvReferenceStore(file_path)
    if cache_ttl > 0:
        logger.info(f"Reference caption cache enabled: ttl={cache_ttl}s")
        return CachingReferenceStore(store, ttl=cache_ttl)
    return store
