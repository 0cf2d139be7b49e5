import argparse
import logging
import random
import sys

import yaml

from species_contrapuntist.config.read_config import load_config_from_yaml
from species_contrapuntist.contrapuntist import (
    FirstSpeciesContrapuntist,
    FirstSpeciesSettings,
)
from species_contrapuntist.output import format_line, write_output
from species_contrapuntist.parser import parse_cantus, read_cantus
from species_contrapuntist.pitch_utils.scale import SCALES
from species_contrapuntist.pitch_utils.types import ABOVE, Direction
from species_contrapuntist.utils.logs import configure_logging
from species_contrapuntist.utils.recursion import SearchBudgetExhausted

LOGGER = logging.getLogger(__name__)

SEED = 42

NO_COUNTERPOINT = 1
BAD_INPUT = 2
BUDGET_EXHAUSTED = 3


def get_parser():
    parser = argparse.ArgumentParser(
        prog="species_contrapuntist",
        description="Write a first-species counterpoint against a cantus firmus",
    )
    parser.add_argument(
        "input_file", nargs="?", help="path to a text file containing the cantus"
    )
    parser.add_argument("--cantus", help="the cantus as text, e.g. 'D4 F4 E4 D4'")
    parser.add_argument("-r", "--root", default="C", help="root of the scale")
    parser.add_argument("-m", "--mode", default="ionian", help="mode of the scale")
    parser.add_argument(
        "-d", "--direction", choices=("above", "below"), default="above"
    )
    parser.add_argument("-c", "--config", help="path to contrapuntist yaml config")
    parser.add_argument("-s", "--seed", type=int, default=SEED)
    parser.add_argument(
        "-o", "--output-file", help="path to output (.mid, .csv, .musicxml, .txt)"
    )
    parser.add_argument("-l", "--log-file", help="path to log file")
    parser.add_argument(
        "-L",
        "--log-level",
        choices=("debug", "info", "warning"),
        default="warning",
        help="log level",
    )
    parser.add_argument(
        "--append-to-log",
        action="store_true",
        help="append to log file (if it exists)",
    )
    return parser


def main(argv=None) -> int:
    parser = get_parser()
    args = parser.parse_args(argv)
    if (args.input_file is None) == (args.cantus is None):
        parser.error("provide exactly one of INPUT_FILE and --cantus")
    configure_logging(args.log_file, args.log_level, args.append_to_log)
    if args.output_file is None:
        LOGGER.warning("No output file provided, skipping output")

    LOGGER.debug(f"Setting seed {args.seed}")
    rng = random.Random(args.seed)

    try:
        if args.cantus is not None:
            cantus = parse_cantus(args.cantus)
        else:
            cantus = read_cantus(args.input_file)
        scale = SCALES[args.root, args.mode]
        if not cantus:
            raise ValueError("cantus firmus must contain at least one pitch")
        settings = load_config_from_yaml(FirstSpeciesSettings, args.config, rng=rng)
    except (ValueError, OSError, yaml.YAMLError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return BAD_INPUT

    direction = Direction.from_string(args.direction)
    contrapuntist = FirstSpeciesContrapuntist(settings, rng=rng)
    try:
        counterpoint = contrapuntist(cantus, scale, direction)
    except SearchBudgetExhausted as exc:
        print(f"Search abandoned: {exc}", file=sys.stderr)
        return BUDGET_EXHAUSTED

    if counterpoint is None:
        print("No counterpoint found")
        return NO_COUNTERPOINT

    if direction is ABOVE:
        lines = (counterpoint, cantus)
    else:
        lines = (cantus, counterpoint)
    for line in lines:
        print(format_line(line))

    if args.output_file is not None:
        write_output(args.output_file, cantus, counterpoint, direction)
        print(f"Wrote {args.output_file}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
