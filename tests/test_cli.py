import unittest

import pytest
from click.testing import CliRunner

from harmonic_finder.cli.main import cli, render_board
from harmonic_finder.fretboard.markers import build_fretboard_markers
from harmonic_finder.fretboard.tunings import preset_tuning


@pytest.fixture
def run(tmp_path):
    runner = CliRunner()

    def invoke(*args):
        return runner.invoke(
            cli, ["--config-dir", str(tmp_path), *args], env={"OPENAI_API_KEY": ""}
        )

    return invoke


def test_keys(run):
    result = run("keys")
    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert len(lines) == 24
    assert lines[:2] == ["C major", "C minor"]


def test_tuning(run):
    result = run("tuning", "--strings", "4")
    assert result.exit_code == 0
    assert "String 1: E1" in result.output
    assert "String 4: G2" in result.output


def test_custom_tuning_reports_bad_strings(run):
    result = run("tuning", "--preset", "custom", "--strings", "2", "-c", "E2", "-c", "X")
    assert result.exit_code == 0
    assert "String 1: E2" in result.output
    assert 'String 2: invalid note "X"' in result.output


def test_custom_notes_imply_custom_preset(run):
    result = run("tuning", "-c", "D2", "-c", "A2", "--strings", "2")
    assert result.exit_code == 0
    assert "String 1: D2" in result.output
    assert "String 2: A2" in result.output


def test_zero_strings_is_not_the_default(run):
    result = run("tuning", "--strings", "0")
    assert result.exit_code == 0
    assert "String" not in result.output


def test_chord_without_service(run):
    result = run("chord", "Am7")
    assert result.exit_code == 0
    assert "source: local" in result.output
    assert "tones: A C E G" in result.output


def test_unparsable_chord(run):
    result = run("chord", "C6")
    assert result.exit_code == 1
    assert "Unable to parse chord" in result.output


def test_builtin_scale(run):
    result = run("scale", "e minor")
    assert result.exit_code == 0
    assert "scale: E minor" in result.output
    assert "source: builtin" in result.output
    assert "tones: E F# G A B C D" in result.output


def test_board_highest_string_on_top(run):
    result = run("board", "--frets", "3", "--key", "C major")
    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[1].startswith("E4")
    assert lines[-1].startswith("E2")
    assert "--E--" in lines[1]


def test_board_degrees(run):
    result = run("board", "--frets", "0", "--chord", "Am", "--degrees")
    assert result.exit_code == 0
    assert "--5--" in result.output.splitlines()[-1]


def test_board_harmonics(run):
    result = run("board", "--harmonics")
    assert result.exit_code == 0
    assert "12:E3(x2)" in result.output.splitlines()[-1]


class TestRenderBoard(unittest.TestCase):
    def test_grid_shape(self):
        tuning = preset_tuning("standard", 6)
        lines = render_board(tuning, build_fretboard_markers(tuning, fret_count=2), 2)
        self.assertEqual(len(lines), 7)
        self.assertEqual(lines[1], "E4|--E--|--F--|--F#-|")


if __name__ == "__main__":
    unittest.main()
