"""
Correlation module.
Pearson correlation between the numeric fields of the normalized dataset,
computed pairwise over rows where both values are present.
"""

from itertools import combinations
from typing import List, Sequence

import numpy as np

from .models import CorrelationPair, FilmRecord, NUMERIC_FIELDS

from loguru import logger


def correlation(records: Sequence[FilmRecord], field_a: str, field_b: str) -> CorrelationPair:
	"""Pearson r for one pair of fields; r is None when it is undefined."""
	pairs = [
		(getattr(r, field_a), getattr(r, field_b))
		for r in records
		if getattr(r, field_a) is not None and getattr(r, field_b) is not None
	]
	if len(pairs) < 2:
		return CorrelationPair(field_a, field_b, None, len(pairs))
	x = np.array([p[0] for p in pairs], dtype=float)
	y = np.array([p[1] for p in pairs], dtype=float)
	if x.var() == 0 or y.var() == 0:
		return CorrelationPair(field_a, field_b, None, len(pairs))
	r = float(np.corrcoef(x, y)[0, 1])
	return CorrelationPair(field_a, field_b, r, len(pairs))


def correlation_matrix(records: Sequence[FilmRecord], fields: Sequence[str] = NUMERIC_FIELDS) -> List[CorrelationPair]:
	"""Every unordered pair of fields, in field order."""
	unknown = [f for f in fields if f not in NUMERIC_FIELDS]
	if unknown:
		raise ValueError(f"Not numeric fields: {unknown}")
	result = [correlation(records, a, b) for a, b in combinations(fields, 2)]
	logger.info(f"[Correlation] Computed {len(result)} field pairs over {len(records)} films")
	return result


def top_correlations(records: Sequence[FilmRecord], target: str = 'rating') -> List[CorrelationPair]:
	"""Correlation of target with every other numeric field, strongest first."""
	if target not in NUMERIC_FIELDS:
		raise ValueError(f"Not a numeric field: {target}")
	result = [correlation(records, target, f) for f in NUMERIC_FIELDS if f != target]
	defined = sorted((p for p in result if p.r is not None), key=lambda p: abs(p.r), reverse=True)
	return defined + [p for p in result if p.r is None]
