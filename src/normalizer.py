"""
Dataset normalization module.
Turns raw spreadsheet rows into typed FilmRecord values through a chain of
pure table transformations: rename -> numeric coercion -> rating parsing -> missing unification.
"""

# Standard libs for math checks and typing
import math  # detect NaN/inf after parsing
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple  # type hints

# Import our FilmRecord data class used across the project
from .models import FilmRecord  # structured film record

# Console logging
from loguru import logger  # console logger

# A table is an ordered tuple of rows; each row maps column name -> cell value
Row = Dict[str, Any]
Table = Tuple[Row, ...]


class SchemaMismatch(ValueError):
	"""Raised when the input columns do not match the expected 11-column layout."""


class CellCoercionFailure(ValueError):
	"""Raised for a single unparsable cell; always recovered inside the normalizer."""


class FilmNormalizer:
	"""
	Normalizes raw film rows into the analysis-ready dataset.
	"""

	# Positional spreadsheet headers -> semantic names (order matters)
	DEFAULT_RENAME_MAP = {
		'Title': 'title',
		'Rating': 'rating',
		'Unnamed: 2': 'release_year',  # the year column has no header in the sheet
		'Director': 'director',
		'Director.1': 'director_2',  # duplicate headers get a numeric suffix on export
		'Director.2': 'director_3',
		'Runtime': 'runtime',
		'Critics': 'critic_score',
		'Critics.1': 'critic_reviews',
		'Audience': 'audience_score',
		'Audience.1': 'audience_reviews',
	}

	# Columns converted to numbers (best-effort)
	NUMERIC_COLUMNS = (
		'critic_score',
		'critic_reviews',
		'audience_score',
		'audience_reviews',
		'release_year',
		'runtime',
	)

	# Numeric columns that hold whole numbers
	INTEGER_COLUMNS = ('critic_reviews', 'audience_reviews', 'release_year', 'runtime')

	RATING_COLUMN = 'rating'
	RATING_SUFFIX = '/5 stars'
	RATING_VALUES = tuple(i / 2 for i in range(11))  # 0, 0.5, ..., 5

	MISSING_SENTINEL = 'N/A'

	def __init__(self, rename_map: Optional[Mapping[str, str]] = None):
		"""Initialize with a custom rename table or the default 11-column layout."""
		self.rename_map = dict(rename_map or self.DEFAULT_RENAME_MAP)  # ordered copy

	def normalize(self, rows: Sequence[Mapping[str, Any]]) -> Tuple[FilmRecord, ...]:
		"""
		Run the full cleaning pipeline and return the normalized dataset.
		Only SchemaMismatch escapes; every cell problem becomes None.
		"""
		logger.info(f"[Normalizer] Normalizing {len(rows)} rows...")  # log action

		table = self.rename_columns(rows)  # semantic column names
		table = self.coerce_numeric(table)  # numbers or None
		table = self.normalize_ratings(table)  # "3.5/5 stars" -> 3.5
		table = self.unify_missing(table)  # "N/A" -> None everywhere
		records = self.to_records(table)  # typed records

		self._log_missing_summary(records)  # diagnostics
		return records

	def rename_columns(self, rows: Sequence[Mapping[str, Any]]) -> Table:
		"""
		Rename positional headers to semantic names.
		Every row must carry exactly the expected columns in the expected order.
		"""
		renamed = []  # accumulator for new rows
		for idx, row in enumerate(rows):
			self.check_columns(list(row.keys()), where=f"Row {idx}")
			renamed.append({self.rename_map[col]: value for col, value in row.items()})
		return tuple(renamed)

	def check_columns(self, columns: Sequence[str], where: str = "Header"):
		"""Raise SchemaMismatch unless columns are exactly the expected headers, in order."""
		expected = list(self.rename_map.keys())  # source headers in order
		if list(columns) != expected:
			raise SchemaMismatch(
				f"{where} has columns {list(columns)}; expected {len(expected)} columns {expected}"
			)

	def coerce_numeric(self, table: Sequence[Row]) -> Table:
		"""Convert the numeric columns to numbers, turning anything unparsable into None."""
		out = []
		failures = 0  # count recovered cells for the summary log
		for row in table:
			new_row = dict(row)  # never mutate the input row
			for col in self.NUMERIC_COLUMNS:
				if col not in new_row:
					continue
				try:
					new_row[col] = self._to_number(new_row[col], integer=col in self.INTEGER_COLUMNS)
				except CellCoercionFailure as e:
					logger.debug(f"[Normalizer] Column '{col}': {e}")  # per-cell trace
					new_row[col] = None
					failures += 1
			out.append(new_row)
		if failures:
			logger.info(f"[Normalizer] Numeric coercion replaced {failures} cells with missing values")
		return tuple(out)

	def normalize_ratings(self, table: Sequence[Row]) -> Table:
		"""Replace the rating string with its numeric star value."""
		out = []
		failures = 0
		for row in table:
			new_row = dict(row)
			if self.RATING_COLUMN in new_row:
				try:
					new_row[self.RATING_COLUMN] = self.parse_rating(new_row[self.RATING_COLUMN])
				except CellCoercionFailure as e:
					logger.debug(f"[Normalizer] Rating: {e}")
					new_row[self.RATING_COLUMN] = None
					failures += 1
			out.append(new_row)
		if failures:
			logger.info(f"[Normalizer] Rating parsing replaced {failures} cells with missing values")
		return tuple(out)

	def unify_missing(self, table: Sequence[Row]) -> Table:
		"""Replace the "N/A" sentinel (and blank/NaN cells) with None in every column."""
		return tuple(
			{col: (None if self._is_missing(value) else value) for col, value in row.items()}
			for row in table
		)

	def to_records(self, table: Sequence[Row]) -> Tuple[FilmRecord, ...]:
		"""Build typed FilmRecord values from a cleaned table."""
		records = []
		for row in table:
			records.append(FilmRecord(
				title=self._clean_text(row.get('title')),
				rating=row.get('rating'),
				release_year=row.get('release_year'),
				director=self._clean_text(row.get('director')),
				director_2=self._clean_text(row.get('director_2')),
				director_3=self._clean_text(row.get('director_3')),
				runtime=row.get('runtime'),
				critic_score=row.get('critic_score'),
				critic_reviews=row.get('critic_reviews'),
				audience_score=row.get('audience_score'),
				audience_reviews=row.get('audience_reviews'),
			))
		return tuple(records)

	def parse_rating(self, value: Any) -> Optional[float]:
		"""
		Parse "<N>/5 stars" into N. Numbers already on the star scale pass through.
		Raises CellCoercionFailure for anything else.
		"""
		if value is None or self._is_missing(value):
			return None
		if isinstance(value, (int, float)) and not isinstance(value, bool):
			number = float(value)  # already parsed on a previous run
		else:
			text = str(value).strip()
			if not text.endswith(self.RATING_SUFFIX):
				raise CellCoercionFailure(f"not a star rating: {value!r}")
			number = self._parse_float(text[:-len(self.RATING_SUFFIX)])
		if number not in self.RATING_VALUES:
			raise CellCoercionFailure(f"rating outside the half-star scale: {value!r}")
		return number

	def _to_number(self, value: Any, integer: bool = False):
		"""Best-effort numeric conversion; None stays None."""
		if value is None:
			return None
		if isinstance(value, bool):
			raise CellCoercionFailure(f"boolean is not numeric: {value!r}")
		if isinstance(value, (int, float)):
			number = float(value)
			if not math.isfinite(number):
				return None  # spreadsheet NaN means an empty cell
		else:
			number = self._parse_float(str(value))
		if integer and number.is_integer():
			return int(number)
		return number

	def _parse_float(self, text: str) -> float:
		try:
			number = float(text.strip())
		except ValueError:
			raise CellCoercionFailure(f"not a number: {text!r}") from None
		if not math.isfinite(number):
			raise CellCoercionFailure(f"not a finite number: {text!r}")
		return number

	def _is_missing(self, value: Any) -> bool:
		if isinstance(value, str):
			return value == self.MISSING_SENTINEL or not value.strip()
		if isinstance(value, float):
			return math.isnan(value)
		return False

	def _clean_text(self, value: Any) -> Optional[str]:
		"""Strip surrounding whitespace; non-text cells are rendered as text."""
		if value is None:
			return None
		if isinstance(value, float) and value.is_integer():
			value = int(value)  # e.g. a numeric title like 1917 read as 1917.0
		text = str(value).strip()
		return text or None

	def _log_missing_summary(self, records: Sequence[FilmRecord]):
		"""Log how many values are missing per field."""
		if not records:
			logger.warning("[Normalizer] Dataset is empty")
			return
		missing: List[str] = []
		for name in FilmRecord.__dataclass_fields__:
			n = sum(1 for r in records if getattr(r, name) is None)
			if n:
				missing.append(f"{name}={n}")
		logger.info(
			f"[Normalizer] Normalized {len(records)} rows | missing: {', '.join(missing) if missing else 'none'}"
		)
