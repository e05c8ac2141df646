import collections
import collections.abc
import logging
import os
import pickle
import sys
import time

import pysam
import tqdm

from .constants import (
    BQ_CACHE_MAGIC,
    BQ_LABEL_DELIMITER,
    BQ_PAIR_DELIMITER,
    BQ_TOKEN_PREFIX,
    FASTQ_HEADER_ANNOTATION_DELIMITER,
    SEGMENT_NAMES,
)

logger = logging.getLogger(__name__)


class QualityIndexCacheError(ValueError):
    pass


# Per-read barcode / UMI qualities.  Any segment may be None if the FASTQ did not provide it:
QualityEntry = collections.namedtuple(
    "QualityEntry", SEGMENT_NAMES, defaults=(None,) * len(SEGMENT_NAMES)
)

EMPTY_QUALITY_ENTRY = QualityEntry()


class QualityIndex(collections.abc.Mapping):
    """Read-only mapping of read key -> QualityEntry.

    Built once before any BAM record is processed and never modified afterwards."""

    def __init__(self, entries=None):
        self._entries = dict(entries) if entries else dict()

    def __getitem__(self, key):
        return self._entries[key]

    def __iter__(self):
        return iter(self._entries)

    def __len__(self):
        return len(self._entries)

    def lookup(self, read_name):
        """Get the QualityEntry for the given read name.  Never fails: a miss yields an empty entry."""
        return self._entries.get(get_read_key(read_name), EMPTY_QUALITY_ENTRY)

    def to_dict(self):
        return dict(self._entries)


def get_read_key(name):
    """Derive the join key from a FASTQ header or BAM query name.

    The key is the first whitespace-delimited token, without a leading '@' and with any
    '|'-delimited annotations (including the BQ token) removed."""
    if name.startswith("@"):
        name = name[1:]

    tokens = name.split()
    if not tokens:
        return ""

    return tokens[0].split(FASTQ_HEADER_ANNOTATION_DELIMITER, 1)[0]


def parse_bq_token(header):
    """Parse the `|BQ:` token from a FASTQ header.

    The token is of the form:
        |BQ:i7:<qual>;i5:<qual>;cbc:<qual>;umi:<qual>
    and extends to the next whitespace.  Segment labels are case-insensitive and any
    subset of them may be present.  Unknown labels are ignored.

    Returns a QualityEntry, or None if the header has no token or no recognized segments.
    """

    bq_start = header.find(BQ_TOKEN_PREFIX)
    if bq_start < 0:
        return None

    token = header[bq_start + len(BQ_TOKEN_PREFIX):]
    token = token.split(maxsplit=1)[0] if token.strip() else ""

    quals = dict()
    for pair in token.split(BQ_PAIR_DELIMITER):
        label, sep, qual = pair.partition(BQ_LABEL_DELIMITER)
        if not sep:
            continue

        label = label.lower()
        if label in SEGMENT_NAMES:
            quals[label] = qual

    if not quals:
        return None

    return QualityEntry(**quals)


def load_quality_index(fastq_path):
    """Load the given FASTQ (plain, gzip, or bgzip) into a QualityIndex keyed by read name.

    Duplicate read keys are resolved last-write-wins."""

    entries = dict()
    num_records = 0
    num_duplicates = 0

    t_start = time.time()
    logger.info(f"Loading barcode qualities from: {fastq_path}")

    with pysam.FastxFile(str(fastq_path)) as fh, tqdm.tqdm(
        desc="Loading barcode qualities",
        unit=" read",
        colour="green",
        file=sys.stderr,
        leave=False,
        disable=not sys.stdin.isatty(),
    ) as pbar:
        for entry in fh:
            num_records += 1
            pbar.update(1)

            header = entry.name if not entry.comment else f"{entry.name} {entry.comment}"
            quals = parse_bq_token(header)
            if quals is None:
                continue

            key = get_read_key(entry.name)
            if key in entries:
                num_duplicates += 1
            entries[key] = quals

    if num_duplicates > 0:
        logger.warning(
            f"Found {num_duplicates} duplicate read name(s) in {fastq_path}.  "
            f"Using the last occurrence of each."
        )

    logger.info(
        f"Loaded barcode qualities for {len(entries)} of {num_records} FASTQ records "
        f"(elapsed: {time.time() - t_start:2.2f}s)."
    )

    return QualityIndex(entries)


def read_quality_index_cache(cache_path):
    with open(cache_path, "rb") as f:
        try:
            magic, entries = pickle.load(f)
        except (pickle.UnpicklingError, EOFError, ValueError, TypeError) as e:
            raise QualityIndexCacheError(f"BQ cache is unreadable: {cache_path}") from e

    if magic != BQ_CACHE_MAGIC:
        raise QualityIndexCacheError(f"BQ cache has invalid header: {cache_path}")

    return QualityIndex(entries)


def write_quality_index_cache(cache_path, quality_index):
    with open(cache_path, "wb") as f:
        pickle.dump((BQ_CACHE_MAGIC, quality_index.to_dict()), f)


def load_quality_index_with_cache(fastq_path, cache_path=None):
    """Load a QualityIndex, preferring the given cache file if it exists.

    If a cache path is given but does not exist yet, the index is loaded from the FASTQ
    and then written to the cache."""

    if cache_path is not None and os.path.exists(cache_path):
        logger.info(f"Loading barcode quality cache: {cache_path}")
        st = time.time()
        quality_index = read_quality_index_cache(cache_path)
        logger.info(f"done. {len(quality_index)} entries (elapsed: {time.time() - st:2.2f}s)")
        return quality_index

    quality_index = load_quality_index(fastq_path)

    if cache_path is not None:
        logger.info(f"Writing barcode quality cache: {cache_path}")
        st = time.time()
        write_quality_index_cache(cache_path, quality_index)
        logger.info(f"done. (elapsed: {time.time() - st:2.2f}s)")

    return quality_index
