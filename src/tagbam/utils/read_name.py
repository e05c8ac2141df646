import collections

from .constants import READ_NAME_FIELD_DELIMITER, READ_NAME_BARCODE_DELIMITER


class ReadNameParseError(ValueError):
    """Raised when a read name does not follow the {run_id}_{i7}-{i5}-{cbc}_{umi} layout."""

    def __init__(self, read_name, reason):
        self.read_name = read_name
        self.reason = reason
        super().__init__(f"{reason}: '{read_name}'")


# Named tuple to store the components embedded in a read name:
class ReadIdentifier(collections.namedtuple("ReadIdentifier", ["run_id", "i7", "i5", "cbc", "umi"])):

    @property
    def cell_barcode(self):
        return self.i7 + self.i5 + self.cbc


def parse_read_name(read_name):
    """Parse a read name of the form {run_id}_{i7}-{i5}-{cbc}_{umi} into a ReadIdentifier.

    Example:
        2efc6b85-aa0d-4c1d-ab33-bf5f442fe47c_TTGGCTCC-GGTCGGCG-ACTTGA_GAAGCAGT
    yields
        ReadIdentifier(run_id='2efc6b85-aa0d-4c1d-ab33-bf5f442fe47c',
                       i7='TTGGCTCC', i5='GGTCGGCG', cbc='ACTTGA', umi='GAAGCAGT')

    Sequences are passed through unmodified (no case normalization or alphabet checks).
    Raises ReadNameParseError if the name deviates from the layout in any way.
    """

    fields = read_name.split(READ_NAME_FIELD_DELIMITER)
    if len(fields) != 3:
        raise ReadNameParseError(
            read_name,
            f"Expected 3 underscore-separated parts in read name, found {len(fields)}",
        )

    run_id, barcode_field, umi = fields

    barcodes = barcode_field.split(READ_NAME_BARCODE_DELIMITER)
    if len(barcodes) != 3:
        raise ReadNameParseError(
            read_name,
            f"Expected 3 hyphen-separated barcode parts, found {len(barcodes)}",
        )

    read_id = ReadIdentifier(run_id, *barcodes, umi)

    empty_fields = [f for f, v in zip(ReadIdentifier._fields, read_id) if not v]
    if empty_fields:
        raise ReadNameParseError(
            read_name, f"Empty read name component(s): {', '.join(empty_fields)}"
        )

    return read_id
