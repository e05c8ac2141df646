import pysam

from pathlib import Path


def convert_sam_to_bam(sam_path, out_bam_path):
    with pysam.AlignmentFile(str(sam_path), "r", check_sq=False, require_index=False) as input_file:
        with pysam.AlignmentFile(str(out_bam_path), "wb", header=input_file.header) as out_bam_file:
            for r in input_file:
                out_bam_file.write(r)


def create_test_bam(path, read_names, tags=None):
    """Create a minimal unaligned bam file with one read per given read name.

    tags is an optional dict of read name -> list of (tag, value) pairs to set on that read."""
    header = pysam.AlignmentHeader.from_dict({
        "HD": {"VN": "1.6", "SO": "unsorted"},
        "SQ": [{"SN": "chr1", "LN": 1000}],
    })

    tags = tags if tags else dict()
    with pysam.AlignmentFile(str(path), "wb", header=header) as out_bam_file:
        for read_name in read_names:
            r = pysam.AlignedSegment(header)
            r.query_name = read_name
            r.query_sequence = "ACGT"
            r.query_qualities = pysam.qualitystring_to_array("IIII")
            r.flag = 4
            for tag, value in tags.get(read_name, []):
                r.set_tag(tag, value, value_type="Z")
            out_bam_file.write(r)


def read_bam(path):
    """Get all reads from the given bam file, in file order."""
    with pysam.AlignmentFile(str(path), "rb", check_sq=False, require_index=False) as bam_file:
        return [r for r in bam_file]


def get_tag_string(read, tag):
    return read.get_tag(tag) if read.has_tag(tag) else None


def assert_read_tags_are_equal(actual_read, expected_read):

    actual_tag_val_dict = dict()
    actual_tag_type_dict = dict()
    for tag, val, tp in actual_read.get_tags(with_value_type=True):
        actual_tag_val_dict[tag] = val
        actual_tag_type_dict[tag] = tp

    expected_tag_val_dict = dict()
    expected_tag_type_dict = dict()
    for tag, val, tp in expected_read.get_tags(with_value_type=True):
        expected_tag_val_dict[tag] = val
        expected_tag_type_dict[tag] = tp

    assert len(actual_tag_val_dict) == len(expected_tag_val_dict), f"Read {actual_read.query_name}: Number of tags not equal: {len(actual_tag_val_dict)} != {len(expected_tag_val_dict)} || {actual_tag_val_dict} | {expected_tag_val_dict}"

    for tag in actual_tag_val_dict.keys():

        assert tag in expected_tag_val_dict, f"Read {actual_read.query_name}: Tag {tag} not in expected tags!"

        actual_val = actual_tag_val_dict[tag]
        actual_tp = actual_tag_type_dict[tag]

        expected_val = expected_tag_val_dict[tag]
        expected_tp = expected_tag_type_dict[tag]

        assert actual_val == expected_val, f"Read {actual_read.query_name}: Actual and expected tag values are not equal for tag {tag}: {actual_val} != {expected_val}"
        assert actual_tp == expected_tp, f"Read {actual_read.query_name}: Actual and expected tag types are not equal for tag {tag}: {actual_tp} != {expected_tp}"


def assert_reads_are_equal(actual_read, expected_read):

    # Go through most fields until tags:
    assert actual_read.query_name == expected_read.query_name, f"Read {actual_read.query_name}: Read names not equal: {actual_read.query_name} != {expected_read.query_name}"
    assert actual_read.flag == expected_read.flag, f"Read {actual_read.query_name}: Read flags not equal"
    assert actual_read.reference_name == expected_read.reference_name, f"Read {actual_read.query_name}: Contig names not equal:  {actual_read.reference_name} != {expected_read.reference_name}"
    assert actual_read.reference_start == expected_read.reference_start, f"Read {actual_read.query_name}: Start position not equal:  {actual_read.reference_start} != {expected_read.reference_start}"
    assert actual_read.mapping_quality == expected_read.mapping_quality, f"Read {actual_read.query_name}: Mapping qualities not equal:  {actual_read.mapping_quality} != {expected_read.mapping_quality}"
    assert actual_read.cigarstring == expected_read.cigarstring, f"Read {actual_read.query_name}: CIGAR strings not equal:  {actual_read.cigarstring} != {expected_read.cigarstring}"
    assert actual_read.query_sequence == expected_read.query_sequence, f"Read {actual_read.query_name}: Base sequences not equal"
    assert actual_read.query_qualities == expected_read.query_qualities, f"Read {actual_read.query_name}: Base qualities not equal"

    # Tags should be viewed as a collection, rather than ordered list.
    # As long as the values between the two reads are all present, we should call the tags equal:
    assert_read_tags_are_equal(actual_read, expected_read)


def assert_reads_files_equal(actual_file, expected_file):
    """Assert that the reads in the two given bam/sam files are equivalent and in the same order."""

    actual_file = Path(actual_file)
    expected_file = Path(expected_file)

    actual_file_flags = "rb" if actual_file.resolve().name.endswith(".bam") else "r"
    expected_file_flags = "rb" if expected_file.resolve().name.endswith(".bam") else "r"

    with pysam.AlignmentFile(str(actual_file), actual_file_flags, check_sq=False, require_index=False) as actual_bam, \
        pysam.AlignmentFile(str(expected_file), expected_file_flags, check_sq=False, require_index=False) as expected_bam:

        actual_reads = [r for r in actual_bam]
        expected_reads = [r for r in expected_bam]

        assert len(actual_reads) == len(expected_reads), f"Number of reads not equal: {len(actual_reads)} != {len(expected_reads)}"

        for read1, read2 in zip(actual_reads, expected_reads):
            assert_reads_are_equal(read1, read2)
