import unittest

from harmonic_finder.fretboard.geometry import (
    fret_positions,
    fret_to_position,
    fretted_marker_position,
    inlay_positions,
    marker_position,
)
from harmonic_finder.fretboard.markers import (
    build_fretboard_markers,
    tag_marker,
    visible_markers,
)
from harmonic_finder.fretboard.tunings import preset_tuning
from harmonic_finder.note_types import FretboardMarker, MarkerMode
from harmonic_finder.theory.chords import parse_chord_locally
from harmonic_finder.theory.keys import find_key


class TestFretboardMarkers(unittest.TestCase):
    def setUp(self):
        self.tuning = preset_tuning("standard", 6)

    def test_one_marker_per_string_and_fret(self):
        markers = build_fretboard_markers(self.tuning)
        self.assertEqual(len(markers), 6 * 25)
        self.assertEqual(markers[0].pitch_class, 4)
        self.assertEqual(markers[0].label, "E")
        self.assertEqual(markers[1].pitch_class, 5)
        self.assertEqual(markers[25].string_index, 1)
        self.assertEqual(markers[25].pitch_class, 9)

    def test_fret_count(self):
        markers = build_fretboard_markers(self.tuning, fret_count=12)
        self.assertEqual(len(markers), 6 * 13)
        self.assertEqual(max(m.fret for m in markers), 12)

    def test_untagged_without_key_or_chord(self):
        for marker in build_fretboard_markers(self.tuning):
            self.assertFalse(marker.is_in_key or marker.is_root or marker.in_chord)

    def test_key_and_chord_flags(self):
        key = find_key("C major")
        chord = parse_chord_locally("Am")
        markers = build_fretboard_markers(self.tuning, key, chord, fret_count=12)
        low_e = [m for m in markers if m.string_index == 0]
        self.assertTrue(low_e[0].is_in_key)  # E
        self.assertTrue(low_e[0].in_chord)
        self.assertFalse(low_e[2].is_in_key)  # F#
        self.assertTrue(low_e[8].is_root)  # C
        self.assertTrue(low_e[8].in_chord)
        self.assertTrue(low_e[1].is_in_key)  # F
        self.assertFalse(low_e[1].in_chord)

    def test_repeatable(self):
        key = find_key("G major")
        first = build_fretboard_markers(self.tuning, key)
        second = build_fretboard_markers(self.tuning, key)
        self.assertEqual(first, second)
        self.assertIsNot(first, second)

    def test_flat_key_spelling(self):
        markers = build_fretboard_markers(self.tuning, find_key("Eb major"), fret_count=3)
        self.assertEqual(markers[2].label, "Gb")
        sharp = build_fretboard_markers(self.tuning, find_key("Eb major"), fret_count=3,
                                        prefer_sharps=True)
        self.assertEqual(sharp[2].label, "F#")

    def test_harmonic_mode(self):
        markers = build_fretboard_markers(
            self.tuning, find_key("E minor"), mode=MarkerMode.HARMONIC
        )
        self.assertEqual(len(markers), 6 * 8)
        octave = [m for m in markers if m.string_index == 0 and m.fret == 12][0]
        self.assertEqual(octave.label, "E3")
        self.assertTrue(octave.is_root)

    def test_visible_markers(self):
        key = find_key("C major")
        chord = parse_chord_locally("C")
        markers = build_fretboard_markers(self.tuning, key, chord, fret_count=5)
        self.assertTrue(all(m.in_chord for m in visible_markers(markers, key, chord)))
        self.assertTrue(all(m.is_in_key for m in visible_markers(markers, key)))
        self.assertEqual(len(visible_markers(markers)), len(markers))

    def test_tag_marker(self):
        marker = FretboardMarker(fret=0, label="E", pitch_class=4, string_index=0)
        tagged = tag_marker(marker, find_key("E minor"), parse_chord_locally("C"))
        self.assertTrue(tagged.is_root and tagged.is_in_key and tagged.in_chord)
        self.assertFalse(marker.is_root)


class TestGeometry(unittest.TestCase):
    def test_ends_of_the_board(self):
        self.assertEqual(fret_to_position(0), 0.0)
        self.assertAlmostEqual(fret_to_position(24), 1.0)
        self.assertAlmostEqual(fret_to_position(12, 24), 2 / 3)

    def test_frets_get_closer(self):
        positions = fret_positions(12)
        self.assertEqual(len(positions), 13)
        gaps = [b - a for a, b in zip(positions, positions[1:])]
        self.assertTrue(all(a > b for a, b in zip(gaps, gaps[1:])))

    def test_marker_positions(self):
        self.assertEqual(fretted_marker_position(0), 0.0)
        mid = fretted_marker_position(1)
        self.assertTrue(0 < mid < fret_to_position(1))
        harmonic = FretboardMarker(fret=12, label="E3", pitch_class=4, string_index=0, partial=2)
        self.assertAlmostEqual(marker_position(harmonic), fret_to_position(12))
        fretted = FretboardMarker(fret=12, label="E", pitch_class=4, string_index=0)
        self.assertLess(marker_position(fretted), fret_to_position(12))

    def test_inlays(self):
        self.assertEqual(len(inlay_positions(24)), 10)
        self.assertEqual(len(inlay_positions(12)), 5)


if __name__ == "__main__":
    unittest.main()
