################################################################################
# Constants for read name parsing:
#######################################

READ_NAME_FIELD_DELIMITER = "_"
READ_NAME_BARCODE_DELIMITER = "-"

I7_SEGMENT_NAME = "i7"
I5_SEGMENT_NAME = "i5"
CBC_SEGMENT_NAME = "cbc"
UMI_SEGMENT_NAME = "umi"

# Order matters: the cell barcode is the concatenation of these segments.
CELL_BARCODE_SEGMENT_NAMES = (I7_SEGMENT_NAME, I5_SEGMENT_NAME, CBC_SEGMENT_NAME)
SEGMENT_NAMES = CELL_BARCODE_SEGMENT_NAMES + (UMI_SEGMENT_NAME,)

################################################################################
# Constants for barcode quality (FASTQ) parsing:
#######################################

BQ_TOKEN_PREFIX = "|BQ:"
BQ_PAIR_DELIMITER = ";"
BQ_LABEL_DELIMITER = ":"
FASTQ_HEADER_ANNOTATION_DELIMITER = "|"

BQ_CACHE_MAGIC = b"TBQMAP01"

# Phred 40 in the Sanger / SAM printable encoding (ASCII 73):
PERFECT_QUAL_CHAR = "I"

################################################################################
# Constants for bam file reading / writing:
#######################################

READ_BARCODE_CORRECTED_TAG = "CB"  # Cell barcode (i7 + i5 + CBC)
READ_BARCODE_QUAL_TAG = "CY"  # Cell barcode read quality
READ_UMI_CORRECTED_TAG = "UB"  # UMI sequence
READ_UMI_QUAL_TAG = "UY"  # UMI read quality

OUTPUT_TAGS = (
    READ_BARCODE_CORRECTED_TAG,
    READ_BARCODE_QUAL_TAG,
    READ_UMI_CORRECTED_TAG,
    READ_UMI_QUAL_TAG,
)

TAG_VALUE_TYPE = "Z"

DEFAULT_THREADS = 4
IN_PLACE_TMP_SUFFIX = ".tmp"

FFORMAT = "2.4f"
