import unittest

import pytest

from harmonic_finder.fretboard.harmonics import (
    HARMONIC_POINTS,
    compute_harmonics_for_string,
    fret_for_fraction,
    nearest_partial,
)


@pytest.mark.parametrize(
    "fret,partial,shift",
    [
        (3.2, 6, 31),
        (4, 5, 28),
        (5, 4, 24),
        (7, 3, 19),
        (9, 5, 28),
        (12, 2, 12),
        (16, 5, 28),
        (19, 3, 19),
    ],
)
def test_nearest_partial(fret, partial, shift):
    point = nearest_partial(fret)
    assert point.fret == fret
    assert point.partial == partial
    assert point.semitone_shift == shift


class TestHarmonics(unittest.TestCase):
    def test_octave_node(self):
        self.assertAlmostEqual(fret_for_fraction(1, 2), 12.0)

    def test_points_follow_fret_order(self):
        self.assertEqual([p.fret for p in HARMONIC_POINTS], [3.2, 4, 5, 7, 9, 12, 16, 19])

    def test_low_e_string(self):
        markers = compute_harmonics_for_string(40, string_index=0)
        by_fret = {m.fret: m for m in markers}
        self.assertEqual(len(markers), 8)
        self.assertEqual(by_fret[12].label, "E3")
        self.assertEqual(by_fret[12].partial, 2)
        self.assertEqual(by_fret[7].label, "B3")
        self.assertEqual(by_fret[5].label, "E4")
        self.assertEqual(by_fret[4].label, "G#4")
        self.assertEqual(by_fret[3.2].label, "B4")

    def test_flat_spelling(self):
        markers = compute_harmonics_for_string(40, prefer_sharps=False)
        self.assertEqual({m.fret: m.label for m in markers}[4], "Ab4")

    def test_markers_are_untagged(self):
        for marker in compute_harmonics_for_string(45, string_index=1):
            self.assertEqual(marker.string_index, 1)
            self.assertFalse(marker.is_in_key or marker.is_root or marker.in_chord)


if __name__ == "__main__":
    unittest.main()
