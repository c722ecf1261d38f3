import unittest

from harmonic_finder.theory.keys import (
    ALL_KEYS,
    MAJOR,
    MINOR,
    find_key,
    is_pitch_class_in_key,
    key_from_tones,
    key_set_from_root,
)


class TestBuiltinKeys(unittest.TestCase):
    def test_twenty_four_keys(self):
        self.assertEqual(len(ALL_KEYS), 24)
        self.assertEqual(len({k.label for k in ALL_KEYS}), 24)
        for key in ALL_KEYS:
            self.assertEqual(len(key.scale), 7)
            self.assertEqual(key.scale[0], key.root)
            self.assertEqual(key.source, "builtin")

    def test_c_major_and_a_minor(self):
        self.assertEqual(key_set_from_root(0, MAJOR).scale, (0, 2, 4, 5, 7, 9, 11))
        self.assertEqual(key_set_from_root(9, MINOR).scale, (9, 11, 0, 2, 4, 5, 7))

    def test_conventional_labels(self):
        self.assertEqual(key_set_from_root(3, MAJOR).label, "Eb major")
        self.assertEqual(key_set_from_root(1, MINOR).label, "C# minor")

    def test_flat_keys_prefer_flats(self):
        self.assertFalse(find_key("Eb major").prefers_sharps)
        self.assertTrue(find_key("E major").prefers_sharps)

    def test_unknown_mode(self):
        with self.assertRaises(ValueError):
            key_set_from_root(0, "lydian")


class TestFindKey(unittest.TestCase):
    def test_exact_and_case_insensitive(self):
        self.assertEqual(find_key("E minor").root, 4)
        self.assertEqual(find_key("e MINOR").label, "E minor")
        self.assertEqual(find_key("  G   major ").label, "G major")

    def test_alternate_spelling_and_short_mode(self):
        self.assertEqual(find_key("D# major").label, "Eb major")
        self.assertEqual(find_key("bb min").label, "Bb minor")

    def test_not_a_builtin_key(self):
        self.assertIsNone(find_key("D dorian"))
        self.assertIsNone(find_key("E4 major"))
        self.assertIsNone(find_key(""))

    def test_membership(self):
        key = find_key("G major")
        self.assertTrue(is_pitch_class_in_key(6, key))
        self.assertFalse(is_pitch_class_in_key(5, key))
        self.assertFalse(is_pitch_class_in_key(7, None))


class TestKeyFromTones(unittest.TestCase):
    def test_mixolydian(self):
        tones = [("Gb", "1"), ("Ab", "2"), ("Bb", "3"), ("Cb", "4"),
                 ("Db", "5"), ("Eb", "6"), ("Fb", "b7")]
        key = key_from_tones("Gb mixolydian", "Gb", tones)
        self.assertEqual(key.root, 6)
        self.assertEqual(key.mode, "mixolydian")
        self.assertEqual(key.source, "llm")
        self.assertEqual(key.scale, (6, 8, 10, 11, 1, 3, 4))
        self.assertEqual(key.degree_map[4], "b7")
        self.assertEqual(key.note_names[11], "Cb")

    def test_root_added_when_missing(self):
        key = key_from_tones("D something", "D", [("E", "2"), ("F#", "3")])
        self.assertEqual(key.scale[0], 2)
        self.assertEqual(key.degree_map[2], "1")

    def test_invalid_tone_rejects_scale(self):
        self.assertIsNone(key_from_tones("X", "C", [("C", "1"), ("H", "2")]))
        self.assertIsNone(key_from_tones("X", "Q", [("C", "1"), ("D", "2")]))

    def test_spelling_follows_root_not_label(self):
        key = key_from_tones("Dorian on Bb", "Bb", [("Bb", "1"), ("C", "2"), ("Db", "b3")])
        self.assertFalse(key.prefers_sharps)
        key = key_from_tones("Lydian on F#", "F#", [("F#", "1"), ("G#", "2"), ("A#", "3")])
        self.assertTrue(key.prefers_sharps)

    def test_dict_round_trip(self):
        key = key_from_tones("D dorian", "D", [("D", "1"), ("E", "2"), ("F", "b3")])
        restored = type(key).from_dict(key.to_dict())
        self.assertEqual(restored, key)


if __name__ == "__main__":
    unittest.main()
