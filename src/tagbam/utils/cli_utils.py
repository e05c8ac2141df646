import logging
from pathlib import Path

import click
import click_log

from .constants import FFORMAT

log = logging.getLogger(__name__)


def create_logger():
    root_log = logging.getLogger()
    click_log.basic_config(root_log)
    root_log.handlers[0].setFormatter(
        logging.Formatter(
            "[%(levelname)5s %(asctime)s %(name)7s] %(message)s",
            "%Y-%m-%d %H:%M:%S",
        )
    )
    log.debug("Configured base logger")


def input_bam(function):
    return click.option(
        "-i",
        "--input",
        "input_bam",
        required=True,
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="Input BAM file.",
    )(function)


def output_bam(help_message):
    # note: this one returns a new decorator
    return click.option(
        "-o",
        "--output",
        "output_bam",
        default=None,
        type=click.Path(dir_okay=False, path_type=Path),
        cls=MutuallyExclusiveOption,
        mutually_exclusive=["in_place"],
        help=help_message,
    )  # no call here


def in_place(function):
    return click.option(
        "--in-place",
        is_flag=True,
        default=False,
        cls=MutuallyExclusiveOption,
        mutually_exclusive=["output_bam"],
        help="Modify the input BAM file in place.",
    )(function)


def force_overwrite(function):
    return click.option(
        "-f",
        "--force",
        is_flag=True,
        default=False,
        show_default=True,
        help="Force overwrite of the output files if they exist.",
    )(function)


class MutuallyExclusiveOption(click.Option):
    """Class to define mutually exclusive options for Click.

    -----------------------
    Used ala:
    -----------------------
    @command(help="Run the command.")
    @option("--output", cls=MutuallyExclusiveOption,
            help="Output file.",
            mutually_exclusive=["in_place"])
    @option("--in-place", is_flag=True,
            cls=MutuallyExclusiveOption,
            help="Modify the input file.",
            mutually_exclusive=["output"])
    def cli(output, in_place):
        print(f"output: {output}")
        print(f"in-place: {in_place}")


    Taken from: https://stackoverflow.com/a/37491504
    """

    def __init__(self, *args, **kwargs):
        self.mutually_exclusive = set(kwargs.pop("mutually_exclusive", []))
        help_msg = kwargs.get("help", "")
        if self.mutually_exclusive:
            ex_str = ", ".join(self.mutually_exclusive)
            kwargs["help"] = help_msg + (
                " NOTE: This argument is mutually exclusive with "
                " arguments: [" + ex_str + "]."
            )
        super(MutuallyExclusiveOption, self).__init__(*args, **kwargs)

    def handle_parse_result(self, ctx, opts, args):
        if self.mutually_exclusive.intersection(opts) and self.name in opts:
            raise click.UsageError(
                "Illegal usage: `{}` is mutually exclusive with "
                "arguments `{}`.".format(self.name, ", ".join(self.mutually_exclusive))
            )

        return super(MutuallyExclusiveOption, self).handle_parse_result(ctx, opts, args)


def format_obnoxious_warning_message(message):
    """Adds some obnoxious formatting to the given message."""
    header = r"""
#############################################
__        ___    ____  _   _ ___ _   _  ____
\ \      / / \  |  _ \| \ | |_ _| \ | |/ ___|
 \ \ /\ / / _ \ | |_) |  \| || ||  \| | |  _
  \ V  V / ___ \|  _ <| |\  || || |\  | |_| |
   \_/\_/_/   \_\_| \_\_| \_|___|_| \_|\____|

#############################################

"""

    return f"{header}{message}\n\n#############################################"


def get_field_count_and_percent_string(count, total, fformat=FFORMAT):
    count_str = f"{count}/{total}"
    pct_str = f"({100.0*zero_safe_div(count, total):{fformat}}%)"

    return count_str, pct_str


def zero_safe_div(n, d):
    return 0 if not d else n / d
