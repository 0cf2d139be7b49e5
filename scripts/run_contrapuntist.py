import sys

from species_contrapuntist.exec.contrapuntist_runner import run_contrapuntist
from species_contrapuntist.exec.script_helpers import (
    custom_excepthook,
    get_base_parser,
    run,
)


def get_args():
    parser = get_base_parser()
    parser.add_argument("--contrapuntist-config", "-C", type=str, default=None)
    args = parser.parse_args()
    if args.debug:
        sys.excepthook = custom_excepthook
    return args


def main():
    args = get_args()
    run(
        f=run_contrapuntist,
        cli_args=args,
        contrapuntist_settings_path=args.contrapuntist_config,
    )


if __name__ == "__main__":
    main()
