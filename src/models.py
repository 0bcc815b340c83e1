"""
Data models for the Film Ratings Analysis.
Defines the core data structures used throughout the pipeline.
"""

# Import dataclass to define simple "record-like" classes without boilerplate
from dataclasses import dataclass  # auto-generates __init__, __repr__, etc.
# Import typing helpers for precise and self-documenting types
from typing import Optional, Tuple  # optional values and fixed-size tuples


@dataclass(frozen=True)
class FilmRecord:
	"""
	Represents a single film row after cleaning.
	A missing value is always None, never a sentinel string like "N/A".
	"""
	title: Optional[str] = None  # film title as written in the sheet
	rating: Optional[float] = None  # personal star rating, 0..5 in half stars
	release_year: Optional[int] = None  # year of release (e.g., 1999)
	director: Optional[str] = None  # primary director
	director_2: Optional[str] = None  # optional second director
	director_3: Optional[str] = None  # optional third director
	runtime: Optional[int] = None  # runtime in minutes
	critic_score: Optional[float] = None  # Rotten Tomatoes critic score (0-100)
	critic_reviews: Optional[int] = None  # number of critic reviews
	audience_score: Optional[float] = None  # Rotten Tomatoes audience score (0-100)
	audience_reviews: Optional[int] = None  # number of audience ratings

	@property
	def directors(self) -> Tuple[str, ...]:
		"""All known directors in column order, each name once."""
		return tuple(dict.fromkeys(d for d in (self.director, self.director_2, self.director_3) if d))


@dataclass(frozen=True)
class GroupSummary:
	"""
	One row of a grouped summary table (one decade, one director, one runtime bucket).
	"""
	key: str  # group label
	field: str  # name of the summarized FilmRecord field
	count: int  # rows in the group, including rows where the field is missing
	rated_count: int  # rows where the field is defined (denominator of the mean)
	mean: Optional[float] = None  # mean of defined values, None if there are none
	cv: Optional[float] = None  # coefficient of variation (population std / mean)


@dataclass(frozen=True)
class CorrelationPair:
	"""Pearson correlation between two numeric fields."""
	field_a: str
	field_b: str
	r: Optional[float]  # None when undefined (too few pairs or zero variance)
	pairs: int  # rows where both fields were defined


# FilmRecord fields that hold numbers (valid targets for summaries and correlations)
NUMERIC_FIELDS = (
	'rating',
	'release_year',
	'runtime',
	'critic_score',
	'critic_reviews',
	'audience_score',
	'audience_reviews',
)
