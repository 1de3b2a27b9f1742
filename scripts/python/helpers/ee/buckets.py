"""Score-bucket vector algebra for Express Entry pool distributions.

The pool is published as counts over fifteen contiguous CRS score bands. A
`BucketVector` holds one float per band and supports the elementwise and
scalar algebra used by the redistribution model and the rate sweep. Band
edges are static; only counts change.

@author: Max Stoddard
"""

from __future__ import annotations

from typing import Iterable, Iterator

import numpy as np

BUCKET_COUNT = 15
SCORE_DOMAIN_MIN = 0
SCORE_DOMAIN_MAX = 1200
# Highest band (601-1200) is only reachable with a provincial nomination.
PNP_BUCKET_INDEX = 14

# Lower/upper CRS edges per band, lowest band first. The top band is open-ended
# upward; SCORE_DOMAIN_MAX caps it for overlap arithmetic.
BUCKET_EDGES: tuple[tuple[int, int], ...] = (
    (SCORE_DOMAIN_MIN, 300),
    (300, 350),
    (350, 400),
    (400, 410),
    (410, 420),
    (420, 430),
    (430, 440),
    (440, 450),
    (450, 460),
    (460, 470),
    (470, 480),
    (480, 490),
    (490, 500),
    (500, 600),
    (600, SCORE_DOMAIN_MAX),
)

_MIN_EDGES = np.array([lower for lower, _ in BUCKET_EDGES], dtype=float)
_MAX_EDGES = np.array([upper for _, upper in BUCKET_EDGES], dtype=float)


def _check_index(index: int) -> int:
    if not 0 <= index < BUCKET_COUNT:
        raise IndexError(f"Bucket index out of range: {index}")
    return index


def min_score(index: int) -> int:
    """Lower CRS edge of a bucket."""
    return BUCKET_EDGES[_check_index(index)][0]


def max_score(index: int) -> int:
    """Upper CRS edge of a bucket."""
    return BUCKET_EDGES[_check_index(index)][1]


def bucket_label(index: int) -> str:
    """Display label in the published style, e.g. '0 - 300' or '301 - 350'."""
    lower = min_score(index)
    upper = max_score(index)
    shown_lower = 0 if lower == 0 else lower + 1
    return f"{shown_lower} - {upper}"


def bucket_labels() -> tuple[str, ...]:
    return tuple(bucket_label(index) for index in range(BUCKET_COUNT))


class BucketVector:
    """Fixed-length per-bucket counts with elementwise and scalar algebra.

    Instances are treated as values: every operation returns a new vector and
    the backing array is never exposed for mutation.
    """

    __slots__ = ("_data",)
    # numpy scalars must defer to the reflected operators below.
    __array_ufunc__ = None

    def __init__(self, values: Iterable[float]) -> None:
        data = np.array(list(values), dtype=float)
        if data.shape != (BUCKET_COUNT,):
            raise ValueError(
                f"BucketVector needs {BUCKET_COUNT} values, got {data.size}."
            )
        data.setflags(write=False)
        self._data = data

    @classmethod
    def _wrap(cls, data: np.ndarray) -> BucketVector:
        vector = cls.__new__(cls)
        frozen = np.array(data, dtype=float)
        frozen.setflags(write=False)
        vector._data = frozen
        return vector

    @classmethod
    def zero(cls) -> BucketVector:
        return cls._wrap(np.zeros(BUCKET_COUNT))

    @classmethod
    def ones(cls) -> BucketVector:
        return cls._wrap(np.ones(BUCKET_COUNT))

    def __getitem__(self, index: int) -> float:
        return float(self._data[_check_index(index)])

    def count(self, index: int) -> float:
        return self[index]

    def __len__(self) -> int:
        return BUCKET_COUNT

    def __iter__(self) -> Iterator[float]:
        return (float(value) for value in self._data)

    def to_list(self) -> list[float]:
        return [float(value) for value in self._data]

    def as_array(self) -> np.ndarray:
        """Return a writable copy of the counts."""
        return self._data.copy()

    def replace(self, index: int, value: float) -> BucketVector:
        data = self._data.copy()
        data[_check_index(index)] = value
        return BucketVector._wrap(data)

    def _operand(self, other: object) -> np.ndarray | float | None:
        if isinstance(other, BucketVector):
            return other._data
        if isinstance(other, (int, float, np.integer, np.floating)):
            return float(other)
        return None

    def __add__(self, other: object) -> BucketVector:
        if not isinstance(other, BucketVector):
            return NotImplemented
        return BucketVector._wrap(self._data + other._data)

    def __sub__(self, other: object) -> BucketVector:
        if not isinstance(other, BucketVector):
            return NotImplemented
        return BucketVector._wrap(self._data - other._data)

    def __mul__(self, other: object) -> BucketVector:
        operand = self._operand(other)
        if operand is None:
            return NotImplemented
        return BucketVector._wrap(self._data * operand)

    def __rmul__(self, other: object) -> BucketVector:
        if isinstance(other, BucketVector):
            return NotImplemented
        return self.__mul__(other)

    def __truediv__(self, other: object) -> BucketVector:
        operand = self._operand(other)
        if operand is None:
            return NotImplemented
        with np.errstate(divide="ignore", invalid="ignore"):
            return BucketVector._wrap(self._data / operand)

    def __neg__(self) -> BucketVector:
        return BucketVector._wrap(-self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BucketVector):
            return NotImplemented
        return bool(np.array_equal(self._data, other._data))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        values = ", ".join(f"{value:g}" for value in self._data)
        return f"BucketVector([{values}])"

    def isclose(self, other: BucketVector, *, rel_tol: float = 1e-9, abs_tol: float = 1e-9) -> bool:
        """Elementwise closeness check used for floating round-trips."""
        return bool(np.allclose(self._data, other._data, rtol=rel_tol, atol=abs_tol))

    def total(self) -> float:
        return float(np.sum(self._data))

    def normalize(self) -> BucketVector:
        """Scale to unit total; a zero-total vector normalizes to zero."""
        total = self.total()
        if total == 0.0:
            return BucketVector.zero()
        return self / total

    def pnp(self) -> BucketVector:
        """Keep only the provincial-nominee band."""
        data = np.zeros(BUCKET_COUNT)
        data[PNP_BUCKET_INDEX] = self._data[PNP_BUCKET_INDEX]
        return BucketVector._wrap(data)

    def non_pnp(self) -> BucketVector:
        """Zero out the provincial-nominee band."""
        return self.replace(PNP_BUCKET_INDEX, 0.0)

    def multiplier_for_count(self, count: float) -> BucketVector:
        """Fraction of each bucket consumed when `count` applicants are drawn top-down.

        Buckets are visited from the highest score down. A bucket smaller than
        the remaining demand is consumed whole; the first bucket that can absorb
        the remainder is consumed partially and the sweep stops there. Demand
        beyond the whole pool is dropped (see `leftover_for_count`).
        """
        multiplier = np.zeros(BUCKET_COUNT)
        remaining = float(count)
        for index in range(BUCKET_COUNT - 1, -1, -1):
            bucket = float(self._data[index])
            if bucket < remaining:
                multiplier[index] = 1.0
                remaining -= bucket
            else:
                # 0/0 when an empty bucket meets exhausted demand.
                multiplier[index] = remaining / bucket if bucket != 0.0 else 0.0
                break
        return BucketVector._wrap(multiplier)

    def leftover_for_count(self, count: float) -> float:
        """Demand left unplaced by `multiplier_for_count`, zero when the pool suffices."""
        consumed = (self * self.multiplier_for_count(count)).total()
        return max(float(count) - consumed, 0.0)

    def multiplier_within_score(self, min_score: float, max_score: float) -> BucketVector:
        """Fractional overlap of [min_score, max_score) with each bucket's band.

        Scores are assumed uniformly spread inside a band, so the overlap width
        divided by the band width is the share of the bucket inside the window.
        """
        lower = np.clip(float(min_score), _MIN_EDGES, _MAX_EDGES)
        upper = np.clip(float(max_score), _MIN_EDGES, _MAX_EDGES)
        return BucketVector._wrap((upper - lower) / (_MAX_EDGES - _MIN_EDGES))

    def within_score(self, min_score: float, max_score: float) -> BucketVector:
        return self * self.multiplier_within_score(min_score, max_score)


def sum_vectors(vectors: Iterable[BucketVector]) -> BucketVector:
    total = BucketVector.zero()
    for vector in vectors:
        total = total + vector
    return total


__all__ = [
    "BUCKET_COUNT",
    "BUCKET_EDGES",
    "BucketVector",
    "PNP_BUCKET_INDEX",
    "SCORE_DOMAIN_MAX",
    "SCORE_DOMAIN_MIN",
    "bucket_label",
    "bucket_labels",
    "max_score",
    "min_score",
    "sum_vectors",
]
