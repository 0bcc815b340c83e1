"""
Unit tests for FilmNormalizer: renaming, numeric coercion, rating parsing and missing values.
Run: python tests/test_normalizer.py
"""

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
	sys.path.insert(0, str(ROOT))

from src.models import FilmRecord
from src.normalizer import FilmNormalizer, SchemaMismatch


HEADERS = list(FilmNormalizer.DEFAULT_RENAME_MAP.keys())


def make_row(title='Heat', rating='4/5 stars', year='1995', director='Michael Mann',
		director_2='N/A', director_3='N/A', runtime='170',
		critic_score='88', critic_reviews='86', audience_score='94', audience_reviews='250000'):
	values = [title, rating, year, director, director_2, director_3, runtime,
		critic_score, critic_reviews, audience_score, audience_reviews]
	return dict(zip(HEADERS, values))


def assert_equal(actual, expected, msg):
	if actual != expected:
		raise AssertionError(f"{msg} | expected={expected}, actual={actual}")


def assert_true(cond, msg):
	if not cond:
		raise AssertionError(msg)


def assert_raises(fn, exc_type, msg):
	try:
		fn()
	except exc_type:
		return
	raise AssertionError(msg)


def test_row_count_preserved():
	normalizer = FilmNormalizer()
	rows = [
		make_row(),
		make_row(title='N/A', rating='N/A', year='N/A', director='N/A', runtime='N/A',
			critic_score='N/A', critic_reviews='N/A', audience_score='N/A', audience_reviews='N/A'),
		make_row(rating='garbage', runtime='two hours'),
	]
	films = normalizer.normalize(rows)
	assert_equal(len(films), len(rows), "row count preserved")
	assert_equal(films[1], FilmRecord(), "all-N/A row becomes an all-missing record, not dropped")
	assert_equal(films[0].title, 'Heat', "row order preserved")


def test_rating_parsing():
	normalizer = FilmNormalizer()
	assert_equal(normalizer.parse_rating("3.5/5 stars"), 3.5, "half-star rating")
	assert_equal(normalizer.parse_rating("0/5 stars"), 0.0, "zero stars")
	assert_equal(normalizer.parse_rating("5/5 stars"), 5.0, "five stars")
	assert_equal(normalizer.parse_rating(4.5), 4.5, "already numeric rating kept")

	films = normalizer.normalize([
		make_row(rating="3.5 stars"),
		make_row(rating="abc/5 stars"),
		make_row(rating="7/5 stars"),
		make_row(rating="3.3/5 stars"),
		make_row(rating="N/A"),
		make_row(rating="2.5/5 stars"),
	])
	assert_equal([f.rating for f in films], [None, None, None, None, None, 2.5], "invalid ratings become missing")


def test_sentinel_replaced_in_every_column():
	films = FilmNormalizer().normalize([make_row(title='N/A', director='N/A', director_2='N/A')])
	assert_true(films[0].title is None, "title sentinel")
	assert_true(films[0].director is None, "director sentinel")
	assert_equal(films[0].directors, (), "no directors left")

	# Only an exact match is the sentinel
	films = FilmNormalizer().normalize([make_row(title='N/A Story', director_2='n/a')])
	assert_equal(films[0].title, 'N/A Story', "partial match kept")
	assert_equal(films[0].director_2, 'n/a', "different case kept")


def test_numeric_coercion():
	normalizer = FilmNormalizer()
	films = normalizer.normalize([
		make_row(year='2014', runtime=' 99 ', critic_score='92.5', audience_reviews='1,234'),
		make_row(year='2014.0', runtime='', critic_score='nan', critic_reviews='inf'),
	])
	first, second = films
	assert_equal(first.release_year, 2014, "year parsed")
	assert_true(isinstance(first.release_year, int), "year is an int")
	assert_equal(first.runtime, 99, "whitespace tolerated")
	assert_equal(first.critic_score, 92.5, "fractional score")
	assert_true(first.audience_reviews is None, "thousands separator is not a number")
	assert_equal(second.release_year, 2014, "integral float year becomes int")
	assert_true(second.runtime is None, "blank runtime is missing")
	assert_true(second.critic_score is None, "nan is missing")
	assert_true(second.critic_reviews is None, "inf is missing")


def test_numeric_coercion_idempotent():
	normalizer = FilmNormalizer()
	table = normalizer.rename_columns([make_row(), make_row(runtime='oops', critic_score='77.5')])
	once = normalizer.coerce_numeric(table)
	twice = normalizer.coerce_numeric(once)
	assert_equal(twice, once, "second coercion is a no-op")

	rated = normalizer.normalize_ratings(once)
	assert_equal(normalizer.normalize_ratings(rated), rated, "rating parsing is a no-op on numbers")


def test_steps_do_not_mutate_input():
	normalizer = FilmNormalizer()
	rows = [make_row()]
	snapshot = [dict(r) for r in rows]
	table = normalizer.rename_columns(rows)
	table_snapshot = [dict(r) for r in table]
	normalizer.unify_missing(normalizer.normalize_ratings(normalizer.coerce_numeric(table)))
	assert_equal(rows, snapshot, "raw rows untouched")
	assert_equal([dict(r) for r in table], table_snapshot, "renamed table untouched")


def test_schema_mismatch():
	normalizer = FilmNormalizer()

	short = make_row()
	short.pop('Audience.1')
	assert_raises(lambda: normalizer.normalize([short]), SchemaMismatch, "missing column must fail")

	row = make_row()
	swapped = {k: row[k] for k in ['Rating', 'Title'] + HEADERS[2:]}
	assert_raises(lambda: normalizer.normalize([swapped]), SchemaMismatch, "wrong order must fail")

	extra = make_row()
	extra['Notes'] = 'rewatch'
	assert_raises(lambda: normalizer.normalize([make_row(), extra]), SchemaMismatch, "extra column must fail")


def test_header_check():
	normalizer = FilmNormalizer()
	normalizer.check_columns(HEADERS)
	assert_raises(lambda: normalizer.check_columns(HEADERS[:3]), SchemaMismatch, "short header must fail")
	assert_raises(lambda: normalizer.check_columns(list(reversed(HEADERS))), SchemaMismatch, "reordered header must fail")


def test_custom_rename_map():
	rename = {f"col{i}": name for i, name in enumerate(FilmNormalizer.DEFAULT_RENAME_MAP.values())}
	normalizer = FilmNormalizer(rename_map=rename)
	row = dict(zip(rename.keys(), make_row().values()))
	films = normalizer.normalize([row])
	assert_equal(films[0].director, 'Michael Mann', "custom headers renamed")
	assert_equal(films[0].rating, 4.0, "rating parsed")


def main():
	print("Running FilmNormalizer tests...")
	test_row_count_preserved()
	print(" - row count ok")
	test_rating_parsing()
	print(" - rating parsing ok")
	test_sentinel_replaced_in_every_column()
	print(" - sentinel ok")
	test_numeric_coercion()
	test_numeric_coercion_idempotent()
	print(" - numeric coercion ok")
	test_steps_do_not_mutate_input()
	print(" - immutability ok")
	test_schema_mismatch()
	test_header_check()
	test_custom_rename_map()
	print(" - schema ok")
	print("All FilmNormalizer tests passed!")


if __name__ == '__main__':
	main()
