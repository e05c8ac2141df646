import collections

from .constants import (
    CELL_BARCODE_SEGMENT_NAMES,
    OUTPUT_TAGS,
    PERFECT_QUAL_CHAR,
    TAG_VALUE_TYPE,
)


class TagSet(collections.namedtuple("TagSet", ["cell_barcode", "cell_barcode_qual", "umi", "umi_qual"])):

    def items(self):
        """(tag, value) pairs in output order: CB, CY, UB, UY."""
        return list(zip(OUTPUT_TAGS, self))


def perfect_quality(length):
    """Create a perfect quality string ('I' == Phred Q40) of the given length."""
    return PERFECT_QUAL_CHAR * length


def get_segment_quality(sequence, quality):
    """Get the quality string to use for the given segment sequence.

    Falls back to perfect quality if the given quality is missing or its length does
    not match the sequence.  A tag whose quality is not the same length as its sequence
    would be invalid."""
    if quality is not None and len(quality) == len(sequence):
        return quality
    return perfect_quality(len(sequence))


def synthesize_tags(read_id, quality_entry=None):
    """Compute the CB / CY / UB / UY values for the given ReadIdentifier.

    Qualities are taken per segment from the given QualityEntry where available."""

    cell_barcode_qual = "".join(
        get_segment_quality(
            getattr(read_id, seg_name),
            getattr(quality_entry, seg_name) if quality_entry is not None else None,
        )
        for seg_name in CELL_BARCODE_SEGMENT_NAMES
    )

    umi_qual = get_segment_quality(
        read_id.umi, quality_entry.umi if quality_entry is not None else None
    )

    return TagSet(read_id.cell_barcode, cell_barcode_qual, read_id.umi, umi_qual)


def find_existing_tags(read):
    """Get the output tags (CB / CY / UB / UY) that are already set on the given read."""
    return [t for t in OUTPUT_TAGS if read.has_tag(t)]


def has_existing_tags(read):
    return any(read.has_tag(t) for t in OUTPUT_TAGS)


def set_read_tags(read, tag_set):
    for tag, value in tag_set.items():
        read.set_tag(tag, value, value_type=TAG_VALUE_TYPE)
