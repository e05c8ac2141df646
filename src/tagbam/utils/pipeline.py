import enum
import logging
from dataclasses import dataclass

from .quality_index import EMPTY_QUALITY_ENTRY
from .read_name import ReadNameParseError, parse_read_name
from .tag_utils import find_existing_tags, set_read_tags, synthesize_tags

logger = logging.getLogger(__name__)


class ReadOutcome(enum.Enum):
    TAGGED = enum.auto()
    SKIPPED_EXISTING = enum.auto()
    SKIPPED_UNPARSEABLE = enum.auto()


@dataclass
class TaggingSummary:
    num_reads: int = 0
    num_tagged: int = 0
    num_skipped_existing: int = 0
    num_skipped_unparseable: int = 0

    @property
    def num_skipped(self):
        return self.num_skipped_existing + self.num_skipped_unparseable

    def record(self, outcome):
        self.num_reads += 1
        if outcome == ReadOutcome.TAGGED:
            self.num_tagged += 1
        elif outcome == ReadOutcome.SKIPPED_EXISTING:
            self.num_skipped_existing += 1
        elif outcome == ReadOutcome.SKIPPED_UNPARSEABLE:
            self.num_skipped_unparseable += 1


class TaggingAbortedError(RuntimeError):
    """Raised when a read name cannot be parsed and unparseable reads are not being skipped.

    Holds the summary of the reads that were written before the failure."""

    def __init__(self, read_name, summary):
        self.read_name = read_name
        self.summary = summary
        super().__init__(
            f"Failed to parse read name '{read_name}' "
            f"(after {summary.num_reads} successfully processed reads)"
        )


def tag_read(read, quality_index=None, skip_unparseable=False):
    """Add CB / CY / UB / UY tags to the given read in place.

    Reads that already carry any of these tags are left unchanged.  Reads with names that
    cannot be parsed are left unchanged if skip_unparseable is set; otherwise the
    ReadNameParseError is raised."""

    existing_tags = find_existing_tags(read)
    if existing_tags:
        logger.warning(
            f"Read '{read.query_name}' already has {'/'.join(existing_tags)} tag(s), skipping"
        )
        return ReadOutcome.SKIPPED_EXISTING

    try:
        read_id = parse_read_name(read.query_name)
    except ReadNameParseError as e:
        if not skip_unparseable:
            raise
        logger.warning(f"Skipping unparseable read name '{read.query_name}': {e.reason}")
        return ReadOutcome.SKIPPED_UNPARSEABLE

    quality_entry = (
        quality_index.lookup(read.query_name) if quality_index is not None else EMPTY_QUALITY_ENTRY
    )

    set_read_tags(read, synthesize_tags(read_id, quality_entry))

    return ReadOutcome.TAGGED


def tag_reads(reads, out_bam_file, quality_index=None, skip_unparseable=False, pbar=None):
    """Tag every read from the given iterable and write it to out_bam_file in input order.

    Returns a TaggingSummary.  Raises TaggingAbortedError on the first unparseable read name
    unless skip_unparseable is set.  Reads before the failing read will already have been
    written; the failing read and everything after it are not."""

    summary = TaggingSummary()

    for read in reads:
        try:
            outcome = tag_read(read, quality_index, skip_unparseable)
        except ReadNameParseError as e:
            raise TaggingAbortedError(read.query_name, summary) from e

        out_bam_file.write(read)
        summary.record(outcome)

        if pbar is not None:
            pbar.update(1)

    return summary
