"""Tests for tournament utility functions."""

from __future__ import annotations

import unittest

from pickabracket.tournament.utils import SeededRandomSource, parse_seed


class SeededRandomSourceTestCase(unittest.TestCase):
    """Test case for the injectable shuffle."""

    def test_shuffle_is_a_permutation(self) -> None:
        """The output holds the same items and leaves the input alone."""
        items = list(range(20))
        shuffled = SeededRandomSource().uniform_shuffle(items)
        self.assertEqual(sorted(shuffled), items)
        self.assertEqual(items, list(range(20)))

    def test_seeded_shuffle_repeats(self) -> None:
        """With a seed every call returns the same permutation."""
        source = SeededRandomSource(7)
        items = [f"p{i}" for i in range(12)]
        self.assertEqual(source.uniform_shuffle(items), source.uniform_shuffle(items))
        self.assertEqual(
            source.uniform_shuffle(items), SeededRandomSource(7).uniform_shuffle(items)
        )

    def test_shuffle_is_roughly_uniform(self) -> None:
        """Every position is reachable for every item."""
        source = SeededRandomSource()
        seen = set()
        for _ in range(400):
            seen.add(tuple(source.uniform_shuffle(["a", "b", "c"])))
        self.assertEqual(len(seen), 6)


class ParseSeedTestCase(unittest.TestCase):
    """Test case for reading TOURNAMENT_SEED."""

    def test_parse_seed(self) -> None:
        """Blank values are unset, digits become ints."""
        self.assertIsNone(parse_seed(None))
        self.assertIsNone(parse_seed("  "))
        self.assertEqual(parse_seed(" 42 "), 42)
        self.assertEqual(parse_seed(5), 5)

    def test_parse_seed_rejects_garbage(self) -> None:
        """Non-integers are a configuration error."""
        with self.assertRaises(ValueError):
            parse_seed("abc")


if __name__ == "__main__":
    unittest.main()
