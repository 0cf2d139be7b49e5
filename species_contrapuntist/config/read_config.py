import logging
import random
import typing as t
from dataclasses import fields
from pathlib import Path
from typing import Type, TypeVar, get_type_hints

import yaml

from species_contrapuntist.pitch_utils.types import SettingsBase

LOGGER = logging.getLogger(__name__)


def get_attribute_type(dataclass_class: Type[SettingsBase], attr_name: str):
    type_hints = get_type_hints(dataclass_class)
    if attr_name not in type_hints:
        raise ValueError(f"{attr_name=} not among the fields of {dataclass_class=}")
    attr_type = type_hints[attr_name]
    # Optional[int] -> int
    args = [arg for arg in t.get_args(attr_type) if arg is not type(None)]
    if t.get_origin(attr_type) is t.Union and len(args) == 1:
        return args[0]
    return attr_type


def get_random_val(expected_type: Type, min_val, max_val, rng=random):
    if expected_type is float:
        return min_val + rng.random() * (max_val - min_val)
    if expected_type is int:
        return rng.randint(min_val, max_val)

    raise ValueError(f"{expected_type=} not supported by get_random_val()")


S = TypeVar("S", bound=SettingsBase)


def _check_keys(settings_class: Type[SettingsBase], keys: t.Iterable[str]):
    field_names = {f.name for f in fields(settings_class)}
    unknown = sorted(set(keys) - field_names)
    if unknown:
        raise ValueError(f"unknown settings for {settings_class.__name__}: {unknown}")


def _read_yaml(yaml_path: str | Path) -> dict[str, t.Any]:
    with open(yaml_path, "r") as yaml_file:
        config_dict = yaml.safe_load(yaml_file)
    if config_dict is None:
        return {}
    if not isinstance(config_dict, dict):
        raise ValueError(f"{yaml_path} should contain a mapping, not {config_dict!r}")
    return config_dict


def load_config_from_yaml_basic(
    settings_class: Type[S], yaml_path: str | Path | None
) -> S:
    if yaml_path is None:
        return settings_class()
    # No randomization
    config_dict = _read_yaml(yaml_path)
    _check_keys(settings_class, config_dict)
    LOGGER.debug(f"loaded {settings_class.__name__} from {yaml_path}: {config_dict}")
    return settings_class(**config_dict)


def load_config_from_yaml(
    settings_class: Type[S], yaml_path: str | Path | None, rng=random
) -> S:
    """Like `load_config_from_yaml_basic` except that a pair of keys `MIN_x` and
    `MAX_x` sets field `x` to a random value drawn uniformly from that range.
    """
    if yaml_path is None:
        return settings_class()
    config_dict = _read_yaml(yaml_path)

    max_range_keys = {}
    min_range_keys = {}
    other_keys = {}

    for key, val in config_dict.items():
        if key.startswith("MAX_"):
            max_range_keys[key] = val
        elif key.startswith("MIN_"):
            min_range_keys[key] = val
        else:
            other_keys[key] = val

    for min_key in min_range_keys:
        base_key = min_key[4:]  # Remove "MIN_"
        if base_key in other_keys:
            raise ValueError(f"Found {min_key=} but also {base_key=}")
        max_key = "MAX_" + base_key
        if max_key not in max_range_keys:
            raise ValueError(f"Found {min_key=} but missing {max_key=}")

    for max_key, max_val in max_range_keys.items():
        base_key = max_key[4:]  # Remove "MAX_"
        if base_key in other_keys:
            raise ValueError(f"Found {max_key=} but also {base_key=}")
        min_key = "MIN_" + base_key
        if min_key not in min_range_keys:
            raise ValueError(f"Found {max_key=} but missing {min_key=}")

        min_val = min_range_keys[min_key]
        expected_type = get_attribute_type(settings_class, base_key)
        random_val = get_random_val(expected_type, min_val, max_val, rng=rng)
        other_keys[base_key] = random_val

    _check_keys(settings_class, other_keys)
    LOGGER.debug(f"loaded {settings_class.__name__} from {yaml_path}: {other_keys}")
    return settings_class(**other_keys)
