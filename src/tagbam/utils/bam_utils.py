import logging
import os
import sys
from pathlib import Path

import pysam

from ..meta import VERSION
from .constants import IN_PLACE_TMP_SUFFIX

logger = logging.getLogger(__name__)


def create_bam_header_with_program_group(command_name, base_bam_header, description):
    """Create a pysam.AlignmentHeader object with program group (PG) information populated by the given arguments.

    The description (DS field) should be the first line of the docstring of the calling subcommand."""

    bam_header_dict = base_bam_header.to_dict()

    # Add our program group to it:
    pg_dict = {
        "ID": f"tagbam-{command_name}-{VERSION}",
        "PN": "tagbam",
        "VN": f"{VERSION}",
        "DS": description,
        "CL": " ".join(sys.argv),
    }
    if "PG" in bam_header_dict:
        # Program group IDs must be unique within a header (e.g. when re-running on our own output):
        existing_ids = {pg.get("ID") for pg in bam_header_dict["PG"]}
        base_id = pg_dict["ID"]
        n = 1
        while pg_dict["ID"] in existing_ids:
            pg_dict["ID"] = f"{base_id}.{n}"
            n += 1
        bam_header_dict["PG"].append(pg_dict)
    else:
        bam_header_dict["PG"] = [pg_dict]
    out_header = pysam.AlignmentHeader.from_dict(bam_header_dict)

    return out_header


def check_for_preexisting_files(file_list, exist_ok=False):
    """Checks if the files in the given file_list exist.
    If any file exists and exist_ok is False, this will exit the program.
    If any file exists and exist_ok is True, the program will continue.
    """

    # Allow users to be a little lazy with what input types they give:
    if not isinstance(file_list, list) and not isinstance(file_list, set):
        file_list = [file_list]

    do_files_exist = False
    for f in file_list:
        if os.path.exists(f) and not str(f) == "/dev/null":
            if exist_ok:
                logger.warning(f"Output file exists: {f}.  Overwriting.")
            else:
                logger.error(f"Output file already exists: {f}!")
                do_files_exist = True
    if do_files_exist:
        sys.exit(1)


def get_in_place_tmp_path(input_bam):
    """Get the hidden temporary file path used while modifying the given bam file in place.

    The file lives next to the input so that the final rename stays on the same file system."""
    input_bam = Path(input_bam)
    return input_bam.parent / f".{input_bam.name}{IN_PLACE_TMP_SUFFIX}"
