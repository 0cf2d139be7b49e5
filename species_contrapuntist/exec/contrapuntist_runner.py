import logging
import os
import random
import typing as t
from dataclasses import dataclass
from pathlib import Path

from species_contrapuntist.config.read_config import (
    load_config_from_yaml,
    load_config_from_yaml_basic,
)
from species_contrapuntist.contrapuntist import (
    FirstSpeciesContrapuntist,
    FirstSpeciesSettings,
)
from species_contrapuntist.output import write_output
from species_contrapuntist.parser import read_cantus
from species_contrapuntist.pitch_utils.pitches import Pitch
from species_contrapuntist.pitch_utils.scale import SCALES
from species_contrapuntist.pitch_utils.types import Direction, SettingsBase

LOGGER = logging.getLogger(__name__)


@dataclass
class RunnerSettings(SettingsBase):
    root: str = "C"
    mode: str = "ionian"
    direction: str = "above"
    write_midi: bool = True
    write_csv: bool = True
    write_txt: bool = True
    write_musicxml: bool = False


def path_formatter(path: str | Path, prefix: str | None = None) -> str:
    """
    >>> path_formatter("cantus/dorian_1.txt", prefix="below")
    'below_dorian_1'
    """
    out = os.path.splitext(os.path.basename(path))[0]
    if prefix is not None:
        out = f"{prefix}_{out}"
    return out


def write_outputs(
    output_folder: str | Path,
    cantus_path: str | Path,
    cantus: t.Sequence[Pitch],
    counterpoint: t.Sequence[Pitch],
    direction: Direction,
    settings: RunnerSettings,
    basename_prefix: str | None = None,
) -> t.List[str]:
    os.makedirs(output_folder, exist_ok=True)
    output_path_wo_ext = os.path.join(
        output_folder, path_formatter(cantus_path, prefix=basename_prefix)
    )
    suffixes = []
    if settings.write_midi:
        suffixes.append(".mid")
    if settings.write_csv:
        suffixes.append(".csv")
    if settings.write_txt:
        suffixes.append(".txt")
    if settings.write_musicxml:
        suffixes.append(".musicxml")

    out = []
    for suffix in suffixes:
        path = f"{output_path_wo_ext}{suffix}"
        write_output(path, cantus, counterpoint, direction)
        print(f"Wrote {path}")
        out.append(path)
    return out


def run_contrapuntist(
    cantus_path: str | Path,
    output_folder: str | Path,
    runner_settings_path: str | Path | None,
    contrapuntist_settings_path: str | Path | None,
    basename_prefix: str | None,
    seed: int | None = None,
) -> t.Optional[t.Tuple[Pitch, ...]]:
    rng = random.Random(seed)
    settings = load_config_from_yaml_basic(RunnerSettings, runner_settings_path)
    contrapuntist_settings = load_config_from_yaml(
        FirstSpeciesSettings, contrapuntist_settings_path, rng=rng
    )
    LOGGER.debug(f"{settings=} {contrapuntist_settings=}")

    cantus = read_cantus(cantus_path)
    scale = SCALES[settings.root, settings.mode]
    direction = Direction.from_string(settings.direction)

    contrapuntist = FirstSpeciesContrapuntist(contrapuntist_settings, rng=rng)
    counterpoint = contrapuntist(cantus, scale, direction)
    if counterpoint is None:
        print(f"No counterpoint found for {cantus_path}")
        return None

    if basename_prefix is None:
        basename_prefix = str(direction)
    else:
        basename_prefix = f"{basename_prefix}_{direction}"
    write_outputs(
        output_folder,
        cantus_path,
        cantus,
        counterpoint,
        direction,
        settings,
        basename_prefix=basename_prefix,
    )
    return counterpoint
