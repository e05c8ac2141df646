import logging
import os
import sys
import time
from pathlib import Path

import click
import pysam
import tqdm

from ..utils import bam_utils, cli_utils
from ..utils.cli_utils import format_obnoxious_warning_message, get_field_count_and_percent_string
from ..utils.pipeline import TaggingAbortedError, tag_reads
from ..utils.quality_index import QualityIndex, load_quality_index_with_cache

PROG_NAME = "tag"

logger = logging.getLogger(__name__)


@click.command(PROG_NAME)
@cli_utils.input_bam
@cli_utils.output_bam("Output BAM file (required unless --in-place is used).")
@cli_utils.in_place
@click.option(
    "--skip-unparseable",
    is_flag=True,
    default=False,
    show_default=True,
    help="Skip reads with unparseable names instead of failing.",
)
@click.option(
    "--fastq-bq",
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Optional FASTQ (plain, gzip, or bgzip) with a BQ token in each header providing barcode / UMI "
    "qualities.  The qualities are loaded into memory before tagging starts.",
)
@click.option(
    "--fastq-bq-cache",
    required=False,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Optional cache file for --fastq-bq.  Loaded if present, otherwise created.",
)
@cli_utils.force_overwrite
@click.pass_context
def main(ctx, input_bam, output_bam, in_place, skip_unparseable, fastq_bq, fastq_bq_cache, force):
    """Tag reads with cell barcodes and UMIs parsed from their names."""

    t_start = time.time()

    if output_bam is None and not in_place:
        raise click.UsageError("Either --output or --in-place must be specified")
    if fastq_bq_cache is not None and fastq_bq is None:
        raise click.UsageError("--fastq-bq-cache requires --fastq-bq")

    if in_place:
        out_path = bam_utils.get_in_place_tmp_path(input_bam)
    else:
        # Writing over the file we're streaming from would destroy it:
        if output_bam.resolve() == input_bam.resolve():
            raise click.UsageError("--output must differ from --input.  Use --in-place to modify the input file.")

        # Check to see if the output files exist:
        bam_utils.check_for_preexisting_files(output_bam, exist_ok=force)
        out_path = output_bam

    threads = ctx.obj["THREADS"]
    logger.info(f"Running with {threads} compression thread(s)")

    # Barcode qualities must be fully loaded before we start, since any read can reference any entry:
    if fastq_bq is not None:
        quality_index = load_quality_index_with_cache(fastq_bq, fastq_bq_cache)
    else:
        quality_index = QualityIndex()

    try:
        summary = _tag_bam(input_bam, out_path, quality_index, skip_unparseable, threads)
    except TaggingAbortedError as e:
        logger.error(f"{e}.  Use --skip-unparseable to pass such reads through untagged.")
        if in_place:
            _remove_quietly(out_path)
        else:
            logger.error(f"Output is incomplete: {out_path}")
        sys.exit(1)
    except BaseException:
        if in_place:
            _remove_quietly(out_path)
        raise

    if in_place:
        os.replace(out_path, input_bam)
        logger.info(f"Replaced {input_bam} with tagged version.")

    count_str, pct_str = get_field_count_and_percent_string(summary.num_tagged, summary.num_reads)
    logger.info(f"Tagged reads: {count_str} {pct_str}")
    count_str, pct_str = get_field_count_and_percent_string(summary.num_skipped_existing, summary.num_reads)
    logger.info(f"Reads skipped (existing tags): {count_str} {pct_str}")
    count_str, pct_str = get_field_count_and_percent_string(summary.num_skipped_unparseable, summary.num_reads)
    logger.info(f"Reads skipped (unparseable name): {count_str} {pct_str}")

    et = time.time()
    logger.info(
        f"Done. Elapsed time: {et - t_start:2.2f}s. "
        f"Overall processing rate: {summary.num_reads/(et - t_start):2.2f} reads/s."
    )

    if summary.num_reads > 0 and summary.num_tagged == 0:
        logger.warning(
            format_obnoxious_warning_message(
                "No reads were tagged.  If this input was already tagged this is expected.  "
                "Otherwise you should check your data."
            )
        )


def _tag_bam(input_bam, out_path, quality_index, skip_unparseable, threads):
    pysam.set_verbosity(0)  # silence message about the .bai file not being found
    with pysam.AlignmentFile(
        str(input_bam), "rb", check_sq=False, require_index=False, threads=threads
    ) as bam_file, tqdm.tqdm(
        desc="Progress",
        unit=" read",
        colour="green",
        file=sys.stderr,
        leave=False,
        disable=not sys.stdin.isatty(),
    ) as pbar:

        out_header = bam_utils.create_bam_header_with_program_group(
            PROG_NAME, bam_file.header, description=main.help.split("\n")[0]
        )

        with pysam.AlignmentFile(
            str(out_path), "wb", header=out_header, threads=threads
        ) as out_bam_file:
            return tag_reads(
                bam_file,
                out_bam_file,
                quality_index=quality_index,
                skip_unparseable=skip_unparseable,
                pbar=pbar,
            )


def _remove_quietly(path):
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
