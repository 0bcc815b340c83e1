"""
Aggregation module.
Groups the normalized dataset by a key (decade, director, runtime bucket)
and produces ordered summary tables.
"""

from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union  # type hints

# Import NumPy for mean / standard deviation over group values
import numpy as np  # numeric arrays

from .models import FilmRecord, GroupSummary, NUMERIC_FIELDS  # core data classes
from .bucketing import Bucketer, decade_bucketer, runtime_bucketer  # interval lookups

# Console logging
from loguru import logger  # console logger

# A key function returns one key, several keys, or None (record excluded)
KeyFunc = Callable[[FilmRecord], Union[None, str, Sequence[str]]]


class AggregationEngine:
	"""
	Computes per-group statistics over the normalized dataset.
	- count: every row in the group, including rows where the field is missing
	- mean / cv: computed over defined values only
	"""

	SORT_KEYS = ('mean', 'cv', 'count')

	def __init__(
		self,
		director_min_count: int = 4,
		runtime_buckets: Optional[Bucketer] = None,
		decade_buckets: Optional[Bucketer] = None,
	):
		self.director_min_count = director_min_count
		self.runtime_buckets = runtime_buckets or runtime_bucketer()
		self.decade_buckets = decade_buckets or decade_bucketer()

	def summarize(
		self,
		records: Sequence[FilmRecord],
		key_fn: KeyFunc,
		field: str = 'rating',
		min_count: Optional[int] = None,
		sort_by: str = 'mean',
		include_cv: bool = True,
		keys: Optional[Sequence[str]] = None,
	) -> List[GroupSummary]:
		"""
		Group records with key_fn and summarize field for each group.
		Sorted descending by sort_by unless an explicit key order is given.
		"""
		return self.summarize_keys(
			records,
			[key_fn(r) for r in records],
			field=field,
			min_count=min_count,
			sort_by=sort_by,
			include_cv=include_cv,
			keys=keys,
		)

	def summarize_keys(
		self,
		records: Sequence[FilmRecord],
		record_keys: Sequence[Union[None, str, Sequence[str]]],
		field: str = 'rating',
		min_count: Optional[int] = None,
		sort_by: str = 'mean',
		include_cv: bool = True,
		keys: Optional[Sequence[str]] = None,
	) -> List[GroupSummary]:
		"""Same as summarize, with the group key(s) of each record given up front."""
		if sort_by not in self.SORT_KEYS:
			raise ValueError(f"sort_by must be one of {self.SORT_KEYS}, got '{sort_by}'")
		if field not in NUMERIC_FIELDS:
			raise ValueError(f"'{field}' is not a numeric field; expected one of {NUMERIC_FIELDS}")

		groups = self._partition(records, record_keys)  # key -> records, in encounter order
		logger.debug(f"[Aggregation] {len(groups)} groups for field '{field}'")

		summaries: List[GroupSummary] = []
		for key, members in groups.items():
			if min_count is not None and len(members) < min_count:
				continue  # small groups give unstable averages
			summaries.append(self._summarize_group(key, members, field, include_cv))

		if keys is not None:
			order = {k: i for i, k in enumerate(keys)}
			summaries.sort(key=lambda s: order.get(s.key, len(order)))
		else:
			summaries = self._sort(summaries, sort_by)

		logger.info(
			f"[Aggregation] Summarized '{field}' into {len(summaries)} groups"
			+ (f" (min_count={min_count}, dropped {len(groups) - len(summaries)})" if min_count else "")
		)
		return summaries

	def by_decade(self, records: Sequence[FilmRecord], field: str = 'rating') -> List[GroupSummary]:
		"""Summary per release decade, in chronological order."""
		return self.summarize_keys(
			records,
			self.decade_buckets.assign_many([r.release_year for r in records]),
			field=field,
			keys=self.decade_buckets.labels,
		)

	def by_runtime(self, records: Sequence[FilmRecord], field: str = 'rating') -> List[GroupSummary]:
		"""Summary per runtime bucket, in bucket order."""
		return self.summarize_keys(
			records,
			self.runtime_buckets.assign_many([r.runtime for r in records]),
			field=field,
			keys=self.runtime_buckets.labels,
		)

	def by_director(
		self,
		records: Sequence[FilmRecord],
		field: str = 'rating',
		min_count: Optional[int] = None,
		sort_by: str = 'mean',
		include_co_directors: bool = False,
	) -> List[GroupSummary]:
		"""
		Summary per director, keeping only directors with enough films.
		With include_co_directors a film counts for each of its directors.
		"""
		if include_co_directors:
			key_fn: KeyFunc = lambda r: r.directors
		else:
			key_fn = lambda r: r.director
		threshold = self.director_min_count if min_count is None else min_count
		return self.summarize(records, key_fn, field=field, min_count=threshold, sort_by=sort_by)

	def rating_distribution(self, records: Sequence[FilmRecord]) -> Tuple[Dict[float, int], int]:
		"""
		Count films per half-star rating.
		Returns ({0.0: n, 0.5: n, ..., 5.0: n}, missing_count).
		"""
		counts = {i / 2: 0 for i in range(11)}  # every value present, ascending
		missing = 0
		for r in records:
			if r.rating is None:
				missing += 1
			else:
				counts[r.rating] = counts.get(r.rating, 0) + 1
		return counts, missing

	def _partition(self, records: Iterable[FilmRecord], record_keys: Iterable) -> Dict[str, List[FilmRecord]]:
		groups: Dict[str, List[FilmRecord]] = {}  # dicts keep insertion order
		for record, key in zip(records, record_keys):
			if key is None:
				continue
			# a record joins each of its groups once, even if a key repeats
			for k in ([key] if isinstance(key, str) else dict.fromkeys(key)):
				groups.setdefault(k, []).append(record)
		return groups

	def _summarize_group(self, key: str, members: List[FilmRecord], field: str, include_cv: bool) -> GroupSummary:
		values = np.array(
			[getattr(m, field) for m in members if getattr(m, field) is not None],
			dtype=float,
		)
		mean = float(values.mean()) if values.size else None
		cv = None
		if include_cv and mean:  # undefined for no values or a zero mean
			cv = float(values.std(ddof=0) / mean)
		return GroupSummary(
			key=key,
			field=field,
			count=len(members),
			rated_count=int(values.size),
			mean=mean,
			cv=cv,
		)

	def _sort(self, summaries: List[GroupSummary], sort_by: str) -> List[GroupSummary]:
		"""Descending by statistic; missing statistics last; ties keep encounter order."""
		defined = [s for s in summaries if getattr(s, sort_by) is not None]
		undefined = [s for s in summaries if getattr(s, sort_by) is None]
		defined.sort(key=lambda s: getattr(s, sort_by), reverse=True)  # sort() is stable
		return defined + undefined
