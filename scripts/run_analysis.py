"""
Print the full film ratings report to the console.

This script:
1) Loads and normalizes the ratings spreadsheet (default data/films.csv)
2) Logs the rating distribution
3) Logs the decade, runtime and director summary tables
4) Logs how the rating correlates with the Rotten Tomatoes fields

Usage:
    python -m scripts.run_analysis [path/to/films.xlsx]
"""

import sys  # optional data path argument
from pathlib import Path  # filesystem-safe paths

from loguru import logger  # console logging

from src.data_loader import DataLoader  # data ingestion
from src.analysis import FilmAnalysis  # summaries


def log_table(title, groups):
	logger.info(f"--- {title} ---")
	for g in groups:
		mean = f"{g.mean:.2f}" if g.mean is not None else "n/a"
		cv = f"{g.cv * 100:.1f}%" if g.cv is not None else "n/a"
		logger.info(f"  {g.key:<28} mean={mean:<6} films={g.count:<4} rated={g.rated_count:<4} cv={cv}")


def main():
	# Headline banner for visibility in console
	logger.info("=" * 60)
	logger.info("Film Ratings Report")
	logger.info("=" * 60)

	# Resolve data path: CLI argument or project default
	root = Path(__file__).resolve().parents[1]  # project root
	data_path = Path(sys.argv[1]) if len(sys.argv) > 1 else root / 'data' / 'films.csv'

	# 1) Load data
	logger.info("[1/4] Loading films...")
	films = DataLoader().load_films(str(data_path))  # read + normalize
	analysis = FilmAnalysis(films)
	logger.info(f"[OK] Loaded {len(films)} films")

	# 2) Distribution
	logger.info("\n[2/4] Rating distribution")
	counts, missing = analysis.distribution()
	for rating, n in counts.items():
		logger.info(f"  {rating:>3} stars  {'#' * n} {n}")
	logger.info(f"  unrated    {missing}")

	# 3) Group tables
	logger.info("\n[3/4] Summary tables")
	log_table("By decade", analysis.decades())
	log_table("By runtime", analysis.runtimes())
	log_table(f"Directors (>= {analysis.engine.director_min_count} films)", analysis.directors())
	log_table("Most consistent directors (by CV, ascending)", [g for g in reversed(analysis.directors(sort_by='cv')) if g.cv is not None])

	# 4) Correlations
	logger.info("\n[4/4] Correlation with my rating")
	for p in analysis.correlations_with('rating'):
		r = f"{p.r:+.3f}" if p.r is not None else "n/a"
		logger.info(f"  {p.field_b:<18} r={r} (n={p.pairs})")

	# Footer
	logger.info("=" * 60)


if __name__ == '__main__':
	main()  # invoke report
