"""
Data loading module.
Reads the ratings spreadsheet (CSV or Excel) into raw rows and hands them to the normalizer.
"""

# Standard libs for typing and paths
from typing import Any, Dict, List, Optional, Tuple  # type hints
from pathlib import Path  # filesystem-safe paths

# pandas reads both CSV and Excel workbooks
import pandas as pd  # tabular file reader

# Import our FilmRecord data class and the normalizer
from .models import FilmRecord  # structured film record
from .normalizer import FilmNormalizer  # cleaning pipeline

# Console logging
from loguru import logger  # console logger


class DataLoader:
	"""
	Handles loading the film ratings spreadsheet.
	"""

	SUPPORTED_SUFFIXES = ('.csv', '.xlsx', '.xls')

	def __init__(self, normalizer: Optional[FilmNormalizer] = None):
		"""Initialize the loader with the normalizer used by load_films."""
		self.normalizer = normalizer or FilmNormalizer()  # default 11-column layout

	def load_rows(self, filepath: str) -> List[Dict[str, Any]]:
		"""
		Read every row as raw text, keyed by header in file order.
		Raises SchemaMismatch when the header is not the expected layout;
		cleaning is left entirely to the normalizer.
		"""
		filepath = Path(filepath)  # normalize path

		# Validate the file presence early to give clear error messages
		if not filepath.exists():
			raise FileNotFoundError(f"Film data file not found: {filepath}")

		suffix = filepath.suffix.lower()
		if suffix not in self.SUPPORTED_SUFFIXES:
			raise ValueError(f"Unsupported file type '{suffix}'; expected one of {self.SUPPORTED_SUFFIXES}")

		logger.info(f"[DataLoader] Loading rows from {filepath}...")  # log action

		# dtype=str + keep_default_na=False keeps "N/A" as text for the normalizer
		if suffix == '.csv':
			df = pd.read_csv(filepath, dtype=str, keep_default_na=False)
		else:
			df = pd.read_excel(filepath, dtype=str, keep_default_na=False)

		# The header decides the schema, even when the sheet has no data rows
		self.normalizer.check_columns(list(df.columns))

		rows = df.to_dict(orient='records')  # list of dicts, columns in file order
		logger.info(f"[DataLoader] Read {len(rows)} rows with {len(df.columns)} columns.")  # summary
		return rows

	def load_films(self, filepath: str) -> Tuple[FilmRecord, ...]:
		"""Load and normalize the spreadsheet in one call."""
		return self.normalizer.normalize(self.load_rows(filepath))

	def get_all_directors(self, films: Tuple[FilmRecord, ...]) -> List[str]:
		"""Return a sorted list of all unique director names (including co-directors)."""
		directors = set()  # unique directors
		for film in films:  # iterate dataset
			directors.update(film.directors)
		return sorted(directors)  # sorted output
