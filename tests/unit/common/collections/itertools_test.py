import random

from absl.testing import absltest
from parameterized import param, parameterized

from collectionx.common.collections.itertools import (
    normalize_index,
    nth,
    sample_distinct,
    tail,
    take,
)
from tests.test_assets.test_case import TestCase


class ItertoolsTest(TestCase):
    def test_take(self):
        self.assertEqual(take(iter([1, 2, 3, 4, 5]), 2), [1, 2])
        self.assertEqual(take([1, 2], 5), [1, 2])
        self.assertEqual(take([1, 2], 0), [])

    def test_take_does_not_overconsume(self):
        numbers = iter(range(10))
        take(numbers, 3)
        self.assertEqual(next(numbers), 3)

    @parameterized.expand(
        [
            param("some", amount=2, expected=[2, 3]),
            param("all", amount=3, expected=[1, 2, 3]),
            param("more_than_available", amount=5, expected=[1, 2, 3]),
            param("zero", amount=0, expected=[]),
            param("fraction_truncated", amount=2.9, expected=[2, 3]),
            param("negative", amount=-1, expected=[]),
        ]
    )
    def test_tail(self, _, amount: int, expected: list[int]):
        self.assertEqual(tail([1, 2, 3], amount), expected)

    def test_take_truncates_fractional_amount(self):
        self.assertEqual(take([1, 2, 3], 1.9), [1])
        self.assertEqual(take([1, 2, 3], -2), [])

    def test_tail_of_dict_view(self):
        self.assertEqual(tail({"a": 1, "b": 2, "c": 3}.values(), 2), [2, 3])

    def test_nth(self):
        self.assertEqual(nth(iter("abc"), 1), "b")
        self.assertEqual(nth({"a": 1, "b": 2}.keys(), 0), "a")
        with self.assertRaises(StopIteration):
            nth([1], 1)

    def test_sample_distinct_truncates_fractional_amount(self):
        self.assertLen(sample_distinct([1, 2, 3], 2.5, random.Random(0)), 2)
        self.assertEqual(sample_distinct([1, 2, 3], 0.5, random.Random(0)), [])

    def test_sample_distinct_draws_each_position_once(self):
        items = ["x", "x", "y", "z"]
        drawn = sample_distinct(items, 4, random.Random(0))
        self.assertCountEqual(drawn, items)

    def test_sample_distinct_caps_at_pool_size(self):
        drawn = sample_distinct([1, 2, 3], 10, random.Random(0))
        self.assertCountEqual(drawn, [1, 2, 3])

    def test_sample_distinct_leaves_pool_untouched(self):
        items = [1, 2, 3]
        sample_distinct(items, 2, random.Random(0))
        self.assertEqual(items, [1, 2, 3])

    @parameterized.expand(
        [
            param("empty_pool", items=[], amount=3),
            param("zero_amount", items=[1, 2], amount=0),
        ]
    )
    def test_sample_distinct_empty_results(self, _, items: list[int], amount: int):
        self.assertEqual(sample_distinct(items, amount, random.Random(0)), [])

    def test_sample_distinct_rejects_negative_amount(self):
        with self.assertRaisesRegex(
            ValueError, "amount must be a non-negative integer, but got -1"
        ):
            sample_distinct([1], -1, random.Random(0))

    @parameterized.expand(
        [
            param("first", index=0, expected=0),
            param("last", index=2, expected=2),
            param("negative_last", index=-1, expected=2),
            param("negative_first", index=-3, expected=0),
            param("past_end", index=3, expected=None),
            param("before_start", index=-4, expected=None),
            param("fraction_truncated", index=1.7, expected=1),
            param("negative_fraction_truncated", index=-1.7, expected=2),
        ]
    )
    def test_normalize_index(self, _, index: float, expected):
        self.assertEqual(normalize_index(index, 3), expected)

    def test_normalize_index_empty(self):
        self.assertIsNone(normalize_index(0, 0))
        self.assertIsNone(normalize_index(-1, 0))


if __name__ == "__main__":
    absltest.main()
