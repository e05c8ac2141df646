import logging
import time
from pathlib import Path

import click

from ..utils import bam_utils, cli_utils
from ..utils.quality_index import load_quality_index, write_quality_index_cache

PROG_NAME = "index"

logger = logging.getLogger(__name__)


@click.command(PROG_NAME)
@click.option(
    "-o",
    "--output-cache",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Barcode quality cache output (for use with `tag --fastq-bq-cache`).",
)
@cli_utils.force_overwrite
@click.argument(
    "fastq", required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
def main(output_cache, force, fastq):
    """Build a barcode quality cache from the BQ tokens in a FASTQ file."""

    t_start = time.time()

    # Check to see if the output files exist:
    bam_utils.check_for_preexisting_files(output_cache, exist_ok=force)

    quality_index = load_quality_index(fastq)
    write_quality_index_cache(output_cache, quality_index)

    logger.info(
        f"Done. Elapsed time: {time.time() - t_start:2.2f}s. "
        f"Wrote {len(quality_index)} entries to {output_cache}."
    )
