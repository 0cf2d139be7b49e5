import pytest

from species_contrapuntist.__main__ import (
    BAD_INPUT,
    BUDGET_EXHAUSTED,
    NO_COUNTERPOINT,
    main,
)
from species_contrapuntist.parser import parse_cantus


def test_cli_with_cantus_text(capsys):
    assert main(["--cantus", "C4 D4 E4 D4 C4", "-s", "3"]) == 0
    out_lines = capsys.readouterr().out.splitlines()
    # Counterpoint is printed above the cantus
    assert out_lines[1] == "C4 D4 E4 D4 C4"
    assert len(parse_cantus(out_lines[0].replace("♯", "#").replace("♭", "b"))) == 5


def test_cli_with_input_file(tmp_path, capsys):
    cantus_path = tmp_path / "cantus.txt"
    cantus_path.write_text("D4 F4 E4 D4 G4 F4 A4 G4 F4 E4 D4\n")
    output_path = tmp_path / "out.txt"
    args = [str(cantus_path), "-r", "D", "-m", "dorian", "-d", "below"]
    args += ["-o", str(output_path)]
    assert main(args) == 0
    out_lines = capsys.readouterr().out.splitlines()
    assert out_lines[0] == "D4 F4 E4 D4 G4 F4 A4 G4 F4 E4 D4"
    assert output_path.read_text().splitlines()[0] == out_lines[0]


def test_cli_no_counterpoint(capsys):
    assert main(["--cantus", "C#4 D4 E4 D4 C4"]) == NO_COUNTERPOINT
    assert "No counterpoint found" in capsys.readouterr().out


@pytest.mark.parametrize(
    "args",
    [
        ["--cantus", "C4 H4"],
        ["--cantus", "   "],
        ["--cantus", "C4 D4", "-m", "bogus"],
        ["--cantus", "C4 D4", "-r", "X"],
    ],
)
def test_cli_bad_input(args, capsys):
    assert main(args) == BAD_INPUT
    assert capsys.readouterr().err.startswith("Error:")


def test_cli_missing_input_file(tmp_path, capsys):
    assert main([str(tmp_path / "no_such_cantus.txt")]) == BAD_INPUT
    assert capsys.readouterr().err.startswith("Error:")


@pytest.mark.parametrize("config", ["nonsense_key: 3\n", "max_steps: [1\n"])
def test_cli_bad_config(tmp_path, capsys, config):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(config)
    args = ["--cantus", "C4 D4 C4", "-c", str(config_path)]
    assert main(args) == BAD_INPUT
    assert capsys.readouterr().err.startswith("Error:")


def test_cli_budget(tmp_path, capsys):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("max_steps: 1\n")
    args = ["--cantus", "C4 D4 E4 D4 C4", "-c", str(config_path)]
    assert main(args) == BUDGET_EXHAUSTED
    assert "Search abandoned" in capsys.readouterr().err


@pytest.mark.parametrize("args", [[], ["cantus.txt", "--cantus", "C4"]])
def test_cli_requires_exactly_one_cantus(args):
    with pytest.raises(SystemExit):
        main(args)
