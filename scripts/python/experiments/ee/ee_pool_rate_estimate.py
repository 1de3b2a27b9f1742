#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Estimate per-bucket Express Entry pool entry rates from a saved rounds feed.

Reads a local copy of ee_rounds_123_en.json, sweeps pool snapshots and
invitation rounds into a daily entry-rate series, optionally smooths it, and
writes:
  - EePoolRateSeries.csv: one row per labeled date, one column per score band;
  - EePoolRateProjection.csv: trailing-window average rate per score band.

Usage:
    python -m scripts.python.experiments.ee.ee_pool_rate_estimate \
        --feed-json private-datasets/ee/ee_rounds_123_en.json --output-dir out

@author: Max Stoddard
"""

from __future__ import annotations

import argparse
import csv
import os
from dataclasses import dataclass
from pathlib import Path

from scripts.python.helpers.common.cli import format_row, positive_int, unit_interval_float
from scripts.python.helpers.common.paths import resolve_input_path, resolve_output_path
from scripts.python.helpers.common.timing import timed_script
from scripts.python.helpers.ee import config as ee_config
from scripts.python.helpers.ee.buckets import BucketVector, bucket_labels
from scripts.python.helpers.ee.feed import load_rounds, parse_invites, parse_snapshots
from scripts.python.helpers.ee.rate import RateSeries, estimate_rate, projected_rate
from scripts.python.helpers.ee.smoothing import smooth_series

SERIES_FILENAME = "EePoolRateSeries.csv"
PROJECTION_FILENAME = "EePoolRateProjection.csv"


@dataclass(frozen=True)
class PoolRateRun:
    snapshot_count: int
    invite_count: int
    series: RateSeries
    projection: BucketVector


def run_pool_rate_estimate(
    *,
    feed_json: Path,
    maturation_days: int,
    alpha: float,
    window: int,
    smooth: bool,
) -> PoolRateRun:
    document = load_rounds(feed_json)
    snapshots = parse_snapshots(document)
    invites = parse_invites(document)

    series = estimate_rate(snapshots, invites, maturation_days=maturation_days)
    if smooth:
        series = smooth_series(series, alpha)
    return PoolRateRun(
        snapshot_count=len(snapshots),
        invite_count=len(invites),
        series=series,
        projection=projected_rate(series, window),
    )


def write_series_csv(series: RateSeries, output_dir: str | None) -> Path:
    output_path = resolve_output_path(SERIES_FILENAME, output_dir)
    frame = series.to_frame()
    frame.index = frame.index.strftime("%Y-%m-%d")
    frame.to_csv(output_path, index_label="date")
    return output_path


def write_projection_csv(projection: BucketVector, output_dir: str | None) -> Path:
    output_path = resolve_output_path(PROJECTION_FILENAME, output_dir)
    with output_path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.writer(handle)
        writer.writerow(["bucket", "daily_rate"])
        for label, value in zip(bucket_labels(), projection):
            writer.writerow([label, value])
        writer.writerow(["total", projection.total()])
    return output_path


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Estimate Express Entry pool entry rates from a saved rounds feed."
    )
    parser.add_argument(
        "--feed-json",
        default=ee_config.EE_FEED_PATH,
        help=f"Path to a saved ee_rounds_123_en.json (default: {ee_config.EE_FEED_PATH}).",
    )
    parser.add_argument(
        "--maturation-days",
        type=positive_int,
        default=ee_config.MATURATION_DAYS,
        help=f"Days an invitation's replacement effect is spread over (default: {ee_config.MATURATION_DAYS}).",
    )
    parser.add_argument(
        "--alpha",
        type=unit_interval_float,
        default=ee_config.SMOOTHING_ALPHA,
        help=f"Exponential smoothing weight (default: {ee_config.SMOOTHING_ALPHA}).",
    )
    parser.add_argument(
        "--window",
        type=positive_int,
        default=ee_config.PROJECTION_WINDOW,
        help=f"Trailing entries averaged for the projection (default: {ee_config.PROJECTION_WINDOW}).",
    )
    parser.add_argument(
        "--smooth",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Smooth the raw rate series before projecting (default: true).",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Optional output directory for CSV exports. Defaults to current working directory.",
    )
    return parser


def main() -> None:
    args = build_arg_parser().parse_args()
    with timed_script(os.path.basename(__file__), "experiment"):
        feed_json = resolve_input_path(args.feed_json, description="rounds feed")
        run = run_pool_rate_estimate(
            feed_json=feed_json,
            maturation_days=args.maturation_days,
            alpha=args.alpha,
            window=args.window,
            smooth=args.smooth,
        )
        series_path = write_series_csv(run.series, args.output_dir)
        projection_path = write_projection_csv(run.projection, args.output_dir)

        print("Express Entry pool entry-rate estimate")
        print(f"Feed: {feed_json}")
        print(f"Snapshots: {run.snapshot_count}  Invites: {run.invite_count}")
        print(f"Rate points: {len(run.series)}  Smoothed: {args.smooth}")
        if run.series.dates:
            print(f"Range: {run.series.dates[0]} to {run.series.dates[-1]}")
        print("")
        print(format_row(["Bucket", "DailyRate"]))
        for label, value in zip(bucket_labels(), run.projection):
            print(format_row([label, value]))
        print(format_row(["total", run.projection.total()]))
        if run.series.warnings:
            print("")
            print("Sweep warnings:")
            for item in run.series.warnings:
                print(f"  - {item}")
        print("")
        print(f"Wrote: {series_path}")
        print(f"Wrote: {projection_path}")


if __name__ == "__main__":
    main()
