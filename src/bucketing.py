"""
Bucketing module.
Maps continuous values (runtime, release year) to labeled intervals for grouping.

Decade buckets cover 1910-2029 only; films released before 1910 or after 2029
fall in no decade and are left out of the decade table.
"""

from typing import List, Optional, Sequence  # type hints

# pandas does the interval lookup
import pandas as pd  # pd.cut


class Bucketer:
	"""
	Assigns a value to one of the intervals (b[i], b[i+1]].
	The upper edge belongs to the bucket, the lower edge does not,
	so a value equal to the first boundary falls in no bucket.
	"""

	def __init__(self, boundaries: Sequence[float], labels: Sequence[str]):
		if len(boundaries) < 2:
			raise ValueError("At least two boundaries are required")
		if any(lo >= hi for lo, hi in zip(boundaries, boundaries[1:])):
			raise ValueError(f"Boundaries must be strictly increasing: {list(boundaries)}")
		if len(labels) != len(boundaries) - 1:
			raise ValueError(
				f"Expected {len(boundaries) - 1} labels for {len(boundaries)} boundaries, got {len(labels)}"
			)
		self.boundaries: List[float] = list(boundaries)
		self.labels: List[str] = list(labels)

	def assign_many(self, values: Sequence[Optional[float]]) -> List[Optional[str]]:
		"""Bucket label per value, None for missing values and values outside every bucket."""
		series = pd.Series(list(values), dtype=float)  # None -> NaN
		cats = pd.cut(series, bins=self.boundaries, labels=self.labels, right=True)
		return [None if pd.isna(c) else str(c) for c in cats]

	def assign(self, value: Optional[float]) -> Optional[str]:
		"""Return the bucket label for value, or None when it falls outside every bucket."""
		return self.assign_many([value])[0]


# Runtime buckets in minutes
RUNTIME_BOUNDARIES = [0, 89, 119, 150, 250]
RUNTIME_LABELS = ['0-89', '90-119', '120-150', '151-250']

# Decades: with integer years, (1929, 1939] is exactly 1930..1939
DECADE_BOUNDARIES = list(range(1909, 2030, 10))
DECADE_LABELS = [f"{b + 1}s" for b in DECADE_BOUNDARIES[:-1]]


def runtime_bucketer() -> Bucketer:
	return Bucketer(RUNTIME_BOUNDARIES, RUNTIME_LABELS)


def decade_bucketer() -> Bucketer:
	return Bucketer(DECADE_BOUNDARIES, DECADE_LABELS)
