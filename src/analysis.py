"""
Analysis module.
High-level facade over the normalized dataset: summary tables, rating distribution,
correlations and director lookup. Used by the API, the Streamlit UI and the report script.
"""

from dataclasses import dataclass  # lightweight containers for results
from typing import Dict, List, Optional, Tuple  # type annotations for clarity

# Fuzzy matching for director names typed by the user
from rapidfuzz import process, fuzz, utils  # fuzzy matching utilities

# Import project modules for data structures and components
from .models import CorrelationPair, FilmRecord, GroupSummary  # core data classes
from .aggregation import AggregationEngine  # grouping + statistics
from .correlation import correlation_matrix, top_correlations  # pairwise Pearson r

# Import loguru for console logging
from loguru import logger  # simple structured logger


@dataclass
class DirectorMatch:
	director: str  # matched director name as written in the data
	score: float  # fuzzy match score (0..100)
	films: List[FilmRecord]  # films where the director appears in any director column
	summary: Optional[GroupSummary]  # rating summary over those films


class FilmAnalysis:
	"""
	Holds one normalized dataset and answers every analysis question about it.
	The dataset is never modified; each call returns fresh results.
	"""
	def __init__(
		self,
		films: Tuple[FilmRecord, ...],  # normalized dataset
		director_min_count: int = 4,  # threshold for director tables
		match_threshold: float = 80.0,  # minimum fuzzy score for director lookup
	):
		self.films = tuple(films)  # keep an immutable reference
		self.engine = AggregationEngine(director_min_count=director_min_count)  # aggregation engine
		self.match_threshold = match_threshold

		# Collect director names once for fuzzy lookups
		names = set()
		for f in self.films:
			names.update(f.directors)
		self._director_list = sorted(names)
		logger.info(f"[Analysis] Ready with {len(self.films)} films and {len(self._director_list)} directors")

	def decades(self, field: str = 'rating') -> List[GroupSummary]:
		return self.engine.by_decade(self.films, field=field)

	def runtimes(self, field: str = 'rating') -> List[GroupSummary]:
		return self.engine.by_runtime(self.films, field=field)

	def directors(
		self,
		min_count: Optional[int] = None,
		sort_by: str = 'mean',
		include_co_directors: bool = False,
	) -> List[GroupSummary]:
		return self.engine.by_director(
			self.films,
			min_count=min_count,
			sort_by=sort_by,
			include_co_directors=include_co_directors,
		)

	def distribution(self) -> Tuple[Dict[float, int], int]:
		return self.engine.rating_distribution(self.films)

	def correlations(self) -> List[CorrelationPair]:
		return correlation_matrix(self.films)

	def correlations_with(self, target: str = 'rating') -> List[CorrelationPair]:
		"""How target tracks every other numeric field, strongest first."""
		return top_correlations(self.films, target=target)

	def find_director(self, query: str) -> Optional[DirectorMatch]:
		"""Fuzzy-match a director name and summarize their films."""
		if not query or not query.strip():  # empty input guard
			raise ValueError("Director query cannot be empty")
		if not self._director_list:
			return None

		best = process.extractOne(
			query.strip(), self._director_list, scorer=fuzz.WRatio, processor=utils.default_process,
		)  # case-insensitive
		if not best or best[1] < self.match_threshold:
			logger.debug(f"[Analysis] No director match for '{query}' (best={best})")
			return None

		name, score = best[0], float(best[1])
		films = [f for f in self.films if name in f.directors]
		# Every film of this director, so no minimum-count filter here
		summaries = self.engine.summarize(films, lambda r: name)
		logger.debug(f"[Analysis] Director match '{query}' -> '{name}' (score={score:.1f}, films={len(films)})")
		return DirectorMatch(
			director=name,
			score=score,
			films=films,
			summary=summaries[0] if summaries else None,
		)
