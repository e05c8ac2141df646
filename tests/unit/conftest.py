import pysam
import pytest


class ListBamWriter:
    """Stand-in for an output pysam.AlignmentFile that keeps written reads in memory."""

    def __init__(self):
        self.reads = []

    def write(self, read):
        self.reads.append(read)


@pytest.fixture
def make_read():
    def _make_read(read_name, tags=()):
        read = pysam.AlignedSegment()
        read.query_name = read_name
        read.query_sequence = "ACGT"
        read.query_qualities = pysam.qualitystring_to_array("IIII")
        read.flag = 4
        for tag, value in tags:
            read.set_tag(tag, value, value_type="Z")
        return read

    return _make_read


@pytest.fixture
def bam_writer():
    return ListBamWriter()
