from __future__ import annotations

import unittest
from datetime import date

from scripts.python.helpers.ee.accumulator import RateAccumulator, RateContribution
from scripts.python.helpers.ee.buckets import BUCKET_COUNT, BucketVector
from scripts.python.helpers.ee.errors import OrderingViolation


def _flat(value: float) -> BucketVector:
    return BucketVector([value] * BUCKET_COUNT)


class TestRateAccumulator(unittest.TestCase):
    def _filled(self) -> RateAccumulator:
        accumulator = RateAccumulator()
        accumulator.insert(RateContribution(expiry=date(2024, 1, 20), value=_flat(1.0)))
        accumulator.insert(RateContribution(expiry=date(2024, 1, 10), value=_flat(2.0)))
        accumulator.insert(RateContribution(expiry=date(2024, 1, 10), value=_flat(4.0)))
        accumulator.insert(RateContribution(expiry=date(2024, 1, 15), value=_flat(8.0)))
        return accumulator

    def test_empty_accumulator(self) -> None:
        accumulator = RateAccumulator()
        self.assertIsNone(accumulator.next_expiry())
        self.assertEqual(accumulator.rate(), BucketVector.zero())
        self.assertEqual(len(accumulator), 0)

    def test_insert_adds_to_running_sum_and_orders_by_soonest_expiry(self) -> None:
        accumulator = self._filled()
        self.assertAlmostEqual(accumulator.rate()[0], 15.0, places=12)
        self.assertEqual(accumulator.next_expiry(), date(2024, 1, 10))
        self.assertEqual(accumulator.pending(), 4)

    def test_update_before_first_expiry_is_a_no_op(self) -> None:
        accumulator = self._filled()
        accumulator.update(date(2024, 1, 5))
        self.assertAlmostEqual(accumulator.rate()[3], 15.0, places=12)
        self.assertEqual(accumulator.pending(), 4)
        self.assertEqual(accumulator.next_expiry(), date(2024, 1, 10))

    def test_update_at_expiry_removes_exactly_that_date(self) -> None:
        accumulator = self._filled()
        accumulator.update(date(2024, 1, 10))
        self.assertAlmostEqual(accumulator.rate()[0], 9.0, places=12)
        self.assertEqual(accumulator.pending(), 2)
        self.assertEqual(accumulator.next_expiry(), date(2024, 1, 15))

        accumulator.update(date(2024, 1, 15))
        accumulator.update(date(2024, 1, 20))
        self.assertTrue(accumulator.rate().isclose(BucketVector.zero()))
        self.assertIsNone(accumulator.next_expiry())

    def test_skipping_past_an_expiry_is_an_ordering_violation(self) -> None:
        accumulator = self._filled()
        with self.assertRaises(OrderingViolation):
            accumulator.update(date(2024, 1, 11))

    def test_update_cannot_move_backwards(self) -> None:
        accumulator = RateAccumulator()
        accumulator.update(date(2024, 2, 1))
        with self.assertRaises(OrderingViolation):
            accumulator.update(date(2024, 1, 31))

    def test_insert_of_already_expired_contribution_is_rejected(self) -> None:
        accumulator = RateAccumulator()
        accumulator.update(date(2024, 2, 1))
        with self.assertRaises(OrderingViolation):
            accumulator.insert(RateContribution(expiry=date(2024, 1, 31), value=_flat(1.0)))


if __name__ == "__main__":
    unittest.main()
