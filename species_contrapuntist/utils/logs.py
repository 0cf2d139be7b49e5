import logging
import typing as t
from types import MappingProxyType

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

LOG_LEVELS: t.Mapping[str, int] = MappingProxyType(
    {
        "debug": logging.DEBUG,
        "info": logging.INFO,
        "warning": logging.WARNING,
        "warn": logging.WARNING,
        "error": logging.ERROR,
    }
)


def get_log_level(log_level: str) -> int:
    """
    >>> get_log_level("Info") == logging.INFO
    True
    """
    try:
        return LOG_LEVELS[log_level.lower()]
    except KeyError:
        raise ValueError(f"{log_level=} is not one of {sorted(LOG_LEVELS)}")


def configure_logging(log_file_path, log_level, append_to_log):
    """Configures the root logger to write to `log_file_path`, or to stderr if it
    is None. An existing log file is overwritten unless `append_to_log` is True.
    """
    level = get_log_level(log_level)
    if log_file_path is None:
        logging.basicConfig(level=level, format=LOG_FORMAT)
        return
    logging.basicConfig(
        filename=log_file_path,
        filemode="a" if append_to_log else "w",
        level=level,
        format=LOG_FORMAT,
    )
