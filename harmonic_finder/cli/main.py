"""Main entry point for the Harmonic Finder CLI."""

import sys
from typing import Dict, List, Optional, Sequence, Tuple

import click

from ..core.config import ConfigManager
from ..core.factory import ComponentFactory
from ..fretboard.markers import build_fretboard_markers, visible_markers
from ..fretboard.tunings import CUSTOM, PRESETS, build_tuning
from ..logging_config import setup_logging
from ..note_types import FretboardMarker, KeySignature, MarkerMode, ParsedChord, StringNote
from ..note_utils import pitch_class_to_name
from ..theory.degrees import marker_text
from ..theory.keys import ALL_KEYS

CELL_WIDTH = 5


def _cell(text: str) -> str:
    return text.center(CELL_WIDTH, "-")


def render_board(
    tuning: Sequence[StringNote],
    markers: Sequence[FretboardMarker],
    fret_count: int,
    label_mode: str = "notes",
    key: Optional[KeySignature] = None,
    chord: Optional[ParsedChord] = None,
) -> List[str]:
    """Render markers as text rows, highest string first.

    Harmonic markers are listed per string instead of placed on a fret grid.
    """
    by_string: Dict[int, List[FretboardMarker]] = {}
    for marker in markers:
        by_string.setdefault(marker.string_index, []).append(marker)

    width = max((len(s.label) for s in tuning), default=0)
    harmonic = any(m.partial is not None for m in markers)
    lines = []
    if not harmonic:
        header = " " * (width + 1) + "".join(str(f).center(CELL_WIDTH) for f in range(fret_count + 1))
        lines.append(header.rstrip())

    for string_index in reversed(range(len(tuning))):
        name = tuning[string_index].label.ljust(width)
        row = by_string.get(string_index, [])
        if harmonic:
            cells = [
                f"{m.fret:g}:{marker_text(m, label_mode, key, chord)}(x{m.partial})" for m in row
            ]
            lines.append(f"{name} " + "  ".join(cells))
        else:
            texts = {m.fret: marker_text(m, label_mode, key, chord) for m in row}
            cells = [_cell(texts.get(fret, "")) for fret in range(fret_count + 1)]
            lines.append(f"{name}|" + "|".join(cells) + "|")
    return lines


def _echo_resolution(resolution, what: str) -> None:
    if not resolution.ok:
        raise click.ClickException(resolution.error)
    value = resolution.value
    click.echo(f"{what}: {value.label}")
    click.echo(f"source: {resolution.source}")
    if resolution.cache is not None:
        click.echo(f"cache: {resolution.cache}")
    if resolution.cache_write is not None:
        line = f"cache write: {resolution.cache_write}"
        if resolution.cache_write_error:
            line += f" ({resolution.cache_write_error})"
        click.echo(line)


def _spelled(pitch_classes, names, prefer_sharps=True) -> Tuple[str, ...]:
    return tuple(
        (names or {}).get(pc) or pitch_class_to_name(pc, prefer_sharps) for pc in pitch_classes
    )


def _build_tuning(defaults, preset, strings, custom):
    # Passing --custom notes implies the custom preset
    if custom:
        preset = CUSTOM
    elif preset is None:
        preset = defaults["preset"]
    string_count = strings if strings is not None else defaults["string_count"]
    return build_tuning(preset, string_count, custom)


@click.group()
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('--config-dir', type=click.Path(file_okay=False), default=None,
              help='Configuration directory (default: ~/.config/harmonic_finder)')
@click.pass_context
def cli(ctx, debug, config_dir):
    """Harmonic Finder - fretboard notes, keys, chords and natural harmonics"""
    setup_logging("DEBUG" if debug else "WARNING")
    ctx.obj = ComponentFactory(ConfigManager(config_dir))


@cli.command()
def keys():
    """List the built-in major and minor keys"""
    for key in ALL_KEYS:
        click.echo(key.label)


@cli.command()
@click.option('--preset', '-p', type=click.Choice(PRESETS), default=None, help='Tuning preset')
@click.option('--strings', '-s', type=int, default=None, help='Number of strings')
@click.option('--custom', '-c', multiple=True, help='Open-string note, low to high (repeatable)')
@click.pass_obj
def tuning(factory, preset, strings, custom):
    """Show the open strings of a tuning"""
    defaults = factory.config_manager.get_config("fretboard")
    result = _build_tuning(defaults, preset, strings, custom)
    for index, string_note in enumerate(result.strings, start=1):
        click.echo(f"String {index}: {string_note.label}")
    for error in result.errors:
        click.echo(error, err=True)


@cli.command()
@click.option('--preset', '-p', type=click.Choice(PRESETS), default=None, help='Tuning preset')
@click.option('--strings', '-s', type=int, default=None, help='Number of strings')
@click.option('--custom', '-c', multiple=True, help='Open-string note, low to high (repeatable)')
@click.option('--frets', '-f', type=int, default=None, help='Highest fret to show')
@click.option('--key', '-k', 'key_label', default=None, help='Key or scale, e.g. "E minor"')
@click.option('--chord', 'chord_text', default=None, help='Chord symbol, e.g. "Am7"')
@click.option('--harmonics', is_flag=True, help='Show natural harmonics instead of fretted notes')
@click.option('--degrees', is_flag=True, help='Label markers with degrees instead of notes')
@click.option('--all', 'show_all', is_flag=True, help='Show every marker, not only highlighted ones')
@click.pass_obj
def board(factory, preset, strings, custom, frets, key_label, chord_text, harmonics, degrees,
          show_all):
    """Print a text fretboard"""
    defaults = factory.config_manager.get_config("fretboard")
    fret_count = frets if frets is not None else defaults["fret_count"]
    result = _build_tuning(defaults, preset, strings, custom)
    for error in result.errors:
        click.echo(error, err=True)

    key = None
    if key_label:
        resolution = factory.create_scale_resolver().resolve(key_label)
        if not resolution.ok:
            raise click.ClickException(resolution.error)
        key = resolution.value

    chord = None
    if chord_text:
        resolution = factory.create_chord_resolver().resolve(chord_text)
        if not resolution.ok:
            raise click.ClickException(resolution.error)
        chord = resolution.value

    mode = MarkerMode.HARMONIC if harmonics else MarkerMode.CONTINUOUS
    markers = build_fretboard_markers(result.strings, key, chord, mode, fret_count)
    if not show_all:
        markers = visible_markers(markers, key, chord)

    label_mode = "degrees" if degrees else "notes"
    for line in render_board(result.strings, markers, fret_count, label_mode, key, chord):
        click.echo(line)


@cli.command()
@click.argument('text')
@click.pass_obj
def chord(factory, text):
    """Resolve a chord symbol into its tones"""
    resolution = factory.create_chord_resolver().resolve(text)
    _echo_resolution(resolution, "chord")
    value = resolution.value
    click.echo(f"root: {value.root.name}")
    click.echo("tones: " + " ".join(_spelled(value.pitch_classes, value.note_names)))
    if value.degree_map:
        click.echo("degrees: " + " ".join(value.degree_map.get(pc, "?") for pc in value.pitch_classes))


@cli.command()
@click.argument('text')
@click.pass_obj
def scale(factory, text):
    """Resolve a key or scale name into its tones"""
    resolution = factory.create_scale_resolver().resolve(text)
    _echo_resolution(resolution, "scale")
    value = resolution.value
    click.echo(f"mode: {value.mode}")
    click.echo("tones: " + " ".join(
        _spelled(value.scale, value.note_names, value.prefers_sharps)
    ))


def main(args: Optional[List[str]] = None) -> int:
    """Run the CLI and return its exit code."""
    try:
        cli.main(args=args, prog_name="harmonic-finder", standalone_mode=False)
    except click.ClickException as e:
        e.show()
        return e.exit_code
    except click.Abort:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
