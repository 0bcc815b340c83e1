"""
Unit tests for pairwise correlations over the normalized dataset.
Run: python tests/test_correlation.py
"""

import math
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
	sys.path.insert(0, str(ROOT))

from src.correlation import correlation, correlation_matrix, top_correlations
from src.models import FilmRecord, NUMERIC_FIELDS


def films():
	return (
		FilmRecord(rating=1.0, critic_score=20.0, audience_score=90.0, runtime=100),
		FilmRecord(rating=2.0, critic_score=40.0, audience_score=70.0, runtime=100),
		FilmRecord(rating=3.0, critic_score=60.0, audience_score=85.0, runtime=100),
		FilmRecord(rating=4.0, critic_score=80.0, audience_score=None, runtime=100),
		FilmRecord(rating=None, critic_score=10.0, audience_score=10.0, runtime=100),
	)


def assert_equal(actual, expected, msg):
	if actual != expected:
		raise AssertionError(f"{msg} | expected={expected}, actual={actual}")


def assert_true(cond, msg):
	if not cond:
		raise AssertionError(msg)


def test_pairwise_complete_rows():
	pair = correlation(films(), 'rating', 'critic_score')
	assert_equal(pair.pairs, 4, "rows with a missing side are skipped")
	assert_true(math.isclose(pair.r, 1.0, abs_tol=1e-9), "perfect linear relation")

	pair = correlation(films(), 'rating', 'audience_score')
	assert_equal(pair.pairs, 3, "missing audience score skipped")
	assert_true(-1.0 <= pair.r <= 1.0, "r is bounded")


def test_undefined_correlations():
	pair = correlation(films(), 'rating', 'runtime')
	assert_true(pair.r is None, "constant runtime has zero variance")

	pair = correlation(films()[:1], 'rating', 'critic_score')
	assert_true(pair.r is None, "a single pair is not enough")
	assert_equal(pair.pairs, 1, "pair count still reported")


def test_matrix_and_ranking():
	matrix = correlation_matrix(films())
	n = len(NUMERIC_FIELDS)
	assert_equal(len(matrix), n * (n - 1) // 2, "every unordered pair once")

	ranked = top_correlations(films(), target='rating')
	assert_equal(ranked[0].field_b, 'critic_score', "strongest first")
	assert_true(all(p.field_a == 'rating' for p in ranked), "target on the left")
	defined = [p for p in ranked if p.r is not None]
	assert_equal(ranked[:len(defined)], defined, "undefined pairs last")

	try:
		correlation_matrix(films(), fields=('rating', 'title'))
	except ValueError:
		pass
	else:
		raise AssertionError("text fields are rejected")


def main():
	print("Running correlation tests...")
	test_pairwise_complete_rows()
	test_undefined_correlations()
	test_matrix_and_ranking()
	print("All correlation tests passed!")


if __name__ == '__main__':
	main()
