import importlib
import logging
import multiprocessing as mp
import pkgutil
import sys

import click
import click_log

import tagbam.commands

from .meta import VERSION
from .utils.cli_utils import create_logger
from .utils.constants import DEFAULT_THREADS

logger = logging.getLogger("tagbam")


@click.group(name="tagbam")
@click_log.simple_verbosity_option(logger, default="INFO")
@click.option(
    "-t",
    "--threads",
    type=int,
    default=DEFAULT_THREADS,
    show_default=True,
    help="number of threads to use for BAM compression / decompression (0 for all)",
)
@click.pass_context
def main_entry(ctx, threads):
    """Re-tag BAM files with cell barcodes and UMIs parsed from read names.

    Read names must be of the form {uuid}_{i7}-{i5}-{CBC}_{UMI}.  The following tags are added:

    \b
      CB:Z  cell barcode (i7 + i5 + CBC concatenated)
      CY:Z  cell barcode quality (all 'I' unless given by --fastq-bq)
      UB:Z  UMI sequence
      UY:Z  UMI quality (all 'I' unless given by --fastq-bq)
    """
    create_logger()
    logger.info("Invoked via: tagbam %s", " ".join(sys.argv[1:]))

    threads = mp.cpu_count() if threads <= 0 or threads > mp.cpu_count() else threads

    ctx.ensure_object(dict)
    ctx.obj["THREADS"] = threads


@main_entry.command()
def version():
    """Print the version of tagbam."""
    click.echo(VERSION)


# Dynamically find and import sub-commands (allows for plugins at run-time):
for p in pkgutil.iter_modules(tagbam.commands.__path__):
    mod = importlib.import_module(f".{p.name}", tagbam.commands.__name__)
    main_entry.add_command(getattr(mod, "main"))


if __name__ == "__main__":
    main_entry()  # pylint: disable=E1120
