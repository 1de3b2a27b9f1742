from __future__ import annotations

import unittest
from datetime import date, timedelta

import numpy as np

from scripts.python.helpers.ee.buckets import BUCKET_COUNT, BucketVector, bucket_labels
from scripts.python.helpers.ee.draws import (
    GENERAL,
    PATHWAY_CEC,
    PATHWAY_PNP,
    InviteEvent,
    PoolSnapshot,
)
from scripts.python.helpers.ee.errors import OrderingViolation
from scripts.python.helpers.ee.rate import RateSeries, estimate_rate, projected_rate

START = date(2024, 1, 1)


def _day(offset: int) -> date:
    return START + timedelta(days=offset)


def _ramp() -> BucketVector:
    return BucketVector(float(value) for value in range(1, 16))


def _flat(value: float) -> BucketVector:
    return BucketVector([value] * BUCKET_COUNT)


def _general(offset: int, size: int, pathway: int = PATHWAY_PNP | PATHWAY_CEC, draw_id: int = 1) -> InviteEvent:
    return InviteEvent(
        draw_id=draw_id,
        date=_day(offset),
        category=GENERAL,
        pathway=pathway,
        size=size,
        score_cutoff=500,
    )


class TestEstimateRateSnapshots(unittest.TestCase):
    def test_empty_snapshots_give_empty_series(self) -> None:
        series = estimate_rate([], [_general(3, 10)])
        self.assertEqual(len(series), 0)
        self.assertEqual(series.warnings, ())

    def test_linear_rate_between_two_snapshots(self) -> None:
        before = _flat(100.0)
        growth = BucketVector([0.0] * 13 + [60.0, 40.0])
        snapshots = [
            PoolSnapshot(date=_day(0), pool=_flat(90.0)),
            PoolSnapshot(date=_day(5), pool=before),
            PoolSnapshot(date=_day(15), pool=before + growth),
        ]
        series = estimate_rate(snapshots, [], maturation_days=3)

        self.assertEqual(series.dates, (_day(10), _day(16)))
        self.assertTrue(series.values[0].isclose(growth / 10.0))
        self.assertAlmostEqual(series.values[0].total(), 10.0, places=9)
        # Nothing is pending once the last snapshot is consumed.
        self.assertTrue(series.values[1].isclose(BucketVector.zero()))

    def test_warm_up_period_is_not_emitted(self) -> None:
        snapshots = [
            PoolSnapshot(date=_day(0), pool=_flat(10.0)),
            PoolSnapshot(date=_day(10), pool=_flat(20.0)),
        ]
        series = estimate_rate(snapshots, [], maturation_days=15)
        self.assertEqual(len(series), 0)

    def test_labels_strictly_increase(self) -> None:
        snapshots = [
            PoolSnapshot(date=_day(offset), pool=_flat(float(offset)))
            for offset in (0, 3, 7, 14, 21, 30)
        ]
        invites = [_general(offset, 5, draw_id=offset) for offset in (4, 9, 9, 18)]
        series = estimate_rate(snapshots, invites, maturation_days=2)
        self.assertGreater(len(series), 0)
        for left, right in zip(series.dates, series.dates[1:]):
            self.assertLess(left, right)

    def test_unsorted_snapshots_are_rejected(self) -> None:
        snapshots = [
            PoolSnapshot(date=_day(5), pool=_flat(1.0)),
            PoolSnapshot(date=_day(5), pool=_flat(2.0)),
        ]
        with self.assertRaises(OrderingViolation):
            estimate_rate(snapshots, [])

    def test_unsorted_invites_are_rejected(self) -> None:
        snapshots = [
            PoolSnapshot(date=_day(0), pool=_ramp()),
            PoolSnapshot(date=_day(30), pool=_ramp()),
        ]
        invites = [_general(10, 5), _general(8, 5)]
        with self.assertRaises(OrderingViolation):
            estimate_rate(snapshots, invites)


class TestEstimateRateInvites(unittest.TestCase):
    def _snapshots(self) -> list[PoolSnapshot]:
        return [
            PoolSnapshot(date=_day(0), pool=_ramp()),
            PoolSnapshot(date=_day(30), pool=_ramp()),
        ]

    def test_invite_adds_replacement_rate_for_maturation_window(self) -> None:
        series = estimate_rate(self._snapshots(), [_general(10, 10)], maturation_days=5)

        self.assertEqual(series.dates, (_day(13), _day(23), _day(31)))
        expected = [0.0] * 14 + [2.0]
        np.testing.assert_allclose(series.values[0].to_list(), expected, atol=1e-12)
        self.assertTrue(series.values[1].isclose(BucketVector.zero()))
        self.assertTrue(series.values[2].isclose(BucketVector.zero()))

    def test_same_day_invites_draw_from_the_remaining_pool(self) -> None:
        invites = [_general(10, 10, draw_id=1), _general(10, 10, draw_id=2)]
        series = estimate_rate(self._snapshots(), invites, maturation_days=5)

        first_rate = series.values[0]
        # First round takes 10 of the 15 in the top band; the second takes the
        # remaining 5 there and 5 from the 501-600 band.
        self.assertAlmostEqual(first_rate[14], 15.0 / 5.0, places=9)
        self.assertAlmostEqual(first_rate[13], 5.0 / 5.0, places=9)
        self.assertAlmostEqual(first_rate.total(), 20.0 / 5.0, places=9)

    def test_invites_before_first_snapshot_are_ignored(self) -> None:
        snapshots = [
            PoolSnapshot(date=_day(5), pool=_ramp()),
            PoolSnapshot(date=_day(40), pool=_ramp()),
        ]
        with_early = estimate_rate(snapshots, [_general(1, 50), _general(20, 10)], maturation_days=5)
        without_early = estimate_rate(snapshots, [_general(20, 10)], maturation_days=5)
        self.assertEqual(with_early.dates, without_early.dates)
        for left, right in zip(with_early.values, without_early.values):
            self.assertTrue(left.isclose(right))

    def test_overflowing_general_round_is_reported(self) -> None:
        series = estimate_rate(
            self._snapshots(),
            [_general(10, 1_000, pathway=PATHWAY_CEC, draw_id=77)],
            maturation_days=5,
        )
        self.assertEqual(len(series.warnings), 1)
        self.assertIn("Draw 77", series.warnings[0])
        # Only the 105 eligible applicants outside the PNP band are removed.
        self.assertAlmostEqual(series.values[0].total(), 105.0 / 5.0, places=9)


class TestRateSeriesAndProjection(unittest.TestCase):
    def test_to_frame_has_bucket_columns(self) -> None:
        series = RateSeries(
            dates=(_day(1), _day(3)),
            values=(_flat(1.0), _ramp()),
        )
        frame = series.to_frame()
        self.assertEqual(list(frame.columns), list(bucket_labels()))
        self.assertEqual(frame.shape, (2, BUCKET_COUNT))
        self.assertAlmostEqual(float(frame.iloc[1, 14]), 15.0, places=12)
        self.assertEqual(series.totals(), [15.0, 120.0])

    def test_empty_frame(self) -> None:
        frame = RateSeries().to_frame()
        self.assertEqual(len(frame), 0)
        self.assertEqual(len(frame.columns), BUCKET_COUNT)

    def test_mismatched_lengths_are_rejected(self) -> None:
        with self.assertRaises(ValueError):
            RateSeries(dates=(_day(1),), values=())

    def test_projection_averages_trailing_window(self) -> None:
        values = [_flat(1.0), _flat(2.0), _flat(4.0)]
        self.assertTrue(projected_rate(values, window=2).isclose(_flat(3.0)))
        self.assertTrue(projected_rate(values, window=181).isclose(_flat(7.0 / 3.0)))

    def test_projection_accepts_rate_series(self) -> None:
        series = RateSeries(dates=(_day(1), _day(2)), values=(_flat(2.0), _flat(6.0)))
        self.assertTrue(projected_rate(series, window=5).isclose(_flat(4.0)))

    def test_projection_of_empty_series_is_zero(self) -> None:
        self.assertEqual(projected_rate([]), BucketVector.zero())


if __name__ == "__main__":
    unittest.main()
