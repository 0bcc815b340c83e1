"""
FastAPI server exposing the film ratings analysis.
Endpoints:
- GET /health: basic health check
- GET /films: the normalized dataset
- GET /summary/decades, /summary/runtimes, /summary/directors: grouped summary tables
- GET /distribution: number of films per half-star rating
- GET /correlations: pairwise Pearson r between numeric fields
- GET /directors/search?q=...: fuzzy director lookup

Startup loads the spreadsheet named by FILM_DATA_PATH (default data/films.csv).
"""

# Import standard libraries for env-based settings and timing
import os  # FILM_DATA_PATH setting
import time  # measure startup latency
from typing import List, Optional  # precise typing for clarity

# Import FastAPI for building the web API and Pydantic for response models
from fastapi import FastAPI, HTTPException, Query  # FastAPI primitives
from pydantic import BaseModel  # response schema definitions

# Import our internal modules for data loading and analysis
from src.data_loader import DataLoader  # loads and normalizes films
from src.analysis import FilmAnalysis  # summary tables + lookups
from src.models import CorrelationPair, FilmRecord, GroupSummary  # core data classes

# Import loguru for simple, structured console logging
from loguru import logger  # convenient console logger

DEFAULT_DATA_PATH = 'data/films.csv'  # used when FILM_DATA_PATH is not set

# Instantiate the FastAPI application with metadata
app = FastAPI(title="Film Ratings Analysis API", version="1.0.0")  # web app

# Globals that hold the analysis instance and measured startup time
ANALYSIS: Optional[FilmAnalysis] = None  # will point to the loaded analysis
STARTUP_TIME_S: float = 0.0  # measures how long startup took


# Pydantic model that describes the shape of a single film in responses
class FilmOut(BaseModel):
	title: Optional[str] = None  # film title
	rating: Optional[float] = None  # star rating 0..5
	release_year: Optional[int] = None  # release year
	directors: List[str]  # all credited directors
	runtime: Optional[int] = None  # minutes
	critic_score: Optional[float] = None  # critic percentage
	critic_reviews: Optional[int] = None  # critic review count
	audience_score: Optional[float] = None  # audience percentage
	audience_reviews: Optional[int] = None  # audience rating count


# Pydantic model for one grouped summary row
class GroupOut(BaseModel):
	key: str  # group label (decade, director, runtime bucket)
	field: str  # summarized field
	count: int  # films in the group
	rated_count: int  # films with a defined value
	mean: Optional[float] = None  # mean of defined values
	cv: Optional[float] = None  # coefficient of variation


class SummaryResponse(BaseModel):
	grouping: str  # which grouping produced the table
	groups: List[GroupOut]  # ordered rows


class DistributionItem(BaseModel):
	rating: float  # half-star value
	films: int  # number of films with that rating


class DistributionResponse(BaseModel):
	items: List[DistributionItem]  # ascending by rating
	missing: int  # films without a rating


class CorrelationOut(BaseModel):
	field_a: str
	field_b: str
	r: Optional[float] = None  # None when undefined
	pairs: int  # rows used


class DirectorResponse(BaseModel):
	query: str  # what the user typed
	director: str  # matched name
	score: float  # fuzzy match score
	summary: Optional[GroupOut] = None  # rating summary over the director's films
	films: List[FilmOut]  # the director's films


def film_out(f: FilmRecord) -> FilmOut:
	return FilmOut(
		title=f.title,
		rating=f.rating,
		release_year=f.release_year,
		directors=list(f.directors),
		runtime=f.runtime,
		critic_score=f.critic_score,
		critic_reviews=f.critic_reviews,
		audience_score=f.audience_score,
		audience_reviews=f.audience_reviews,
	)


def group_out(s: GroupSummary) -> GroupOut:
	return GroupOut(
		key=s.key,
		field=s.field,
		count=s.count,
		rated_count=s.rated_count,
		mean=round(s.mean, 3) if s.mean is not None else None,
		cv=round(s.cv, 4) if s.cv is not None else None,
	)


def correlation_out(p: CorrelationPair) -> CorrelationOut:
	return CorrelationOut(
		field_a=p.field_a,
		field_b=p.field_b,
		r=round(p.r, 4) if p.r is not None else None,
		pairs=p.pairs,
	)


def require_analysis() -> FilmAnalysis:
	"""Return the loaded analysis or fail with 503 when startup did not load data."""
	if ANALYSIS is None:  # data must be ready to serve
		logger.warning("[API] Request received but dataset not loaded")  # guard log
		raise HTTPException(status_code=503, detail="Dataset not loaded")
	return ANALYSIS


# FastAPI startup hook to load the dataset once
@app.on_event("startup")
async def startup_event():
	"""Load and normalize the spreadsheet and log how long it took."""
	global ANALYSIS, STARTUP_TIME_S  # refer to module-level globals
	start = time.time()  # start timer for startup latency

	data_path = os.getenv('FILM_DATA_PATH', DEFAULT_DATA_PATH)  # where the sheet lives
	logger.info(f"[API] Startup: loading films from {data_path}...")  # log intent

	# A missing or malformed file leaves the API up but unready
	try:
		films = DataLoader().load_films(data_path)  # read + normalize
	except (FileNotFoundError, ValueError) as e:
		logger.error(f"[API] Failed to load dataset: {e}")
		ANALYSIS = None
		return

	ANALYSIS = FilmAnalysis(films)  # build facade
	STARTUP_TIME_S = time.time() - start  # elapsed seconds
	logger.info(f"[API] Startup complete in {STARTUP_TIME_S:.2f}s with {len(films)} films.")  # summary log


# Simple health endpoint for readiness checks
@app.get("/health")
async def health():
	"""Return minimal health info for liveness/readiness probes."""
	return {
		"status": "ok",  # constant indicator
		"data_ready": ANALYSIS is not None,  # True if dataset loaded
		"films": len(ANALYSIS.films) if ANALYSIS is not None else 0,  # dataset size
		"startup_seconds": round(STARTUP_TIME_S, 2)  # startup latency
	}


@app.get("/films", response_model=List[FilmOut])
async def films():
	"""Return the whole normalized dataset in source order."""
	analysis = require_analysis()
	return [film_out(f) for f in analysis.films]


@app.get("/summary/decades", response_model=SummaryResponse)
async def summary_decades(field: str = 'rating'):
	"""Per-decade summary in chronological order."""
	analysis = require_analysis()
	try:
		groups = analysis.decades(field=field)
	except ValueError as e:
		raise HTTPException(status_code=422, detail=str(e))
	return SummaryResponse(grouping='decade', groups=[group_out(g) for g in groups])


@app.get("/summary/runtimes", response_model=SummaryResponse)
async def summary_runtimes(field: str = 'rating'):
	"""Per-runtime-bucket summary in bucket order."""
	analysis = require_analysis()
	try:
		groups = analysis.runtimes(field=field)
	except ValueError as e:
		raise HTTPException(status_code=422, detail=str(e))
	return SummaryResponse(grouping='runtime', groups=[group_out(g) for g in groups])


@app.get("/summary/directors", response_model=SummaryResponse)
async def summary_directors(
	min_count: Optional[int] = Query(None, ge=1, description="Minimum films per director (default 4)"),
	sort_by: str = Query('mean', description="mean, cv or count"),
	include_co_directors: bool = False,
):
	"""Per-director summary, small groups suppressed."""
	analysis = require_analysis()
	try:
		groups = analysis.directors(min_count=min_count, sort_by=sort_by, include_co_directors=include_co_directors)
	except ValueError as e:
		raise HTTPException(status_code=422, detail=str(e))
	logger.debug(f"[API] /summary/directors min_count={min_count} sort_by={sort_by} -> {len(groups)} groups")
	return SummaryResponse(grouping='director', groups=[group_out(g) for g in groups])


@app.get("/distribution", response_model=DistributionResponse)
async def distribution():
	"""Films per half-star rating, for the bar chart."""
	analysis = require_analysis()
	counts, missing = analysis.distribution()
	return DistributionResponse(
		items=[DistributionItem(rating=k, films=v) for k, v in counts.items()],
		missing=missing,
	)


@app.get("/correlations", response_model=List[CorrelationOut])
async def correlations(target: Optional[str] = None):
	"""All field pairs, or only the pairs involving target sorted by strength."""
	analysis = require_analysis()
	try:
		pairs = analysis.correlations() if target is None else analysis.correlations_with(target)
	except ValueError as e:
		raise HTTPException(status_code=422, detail=str(e))
	return [correlation_out(p) for p in pairs]


@app.get("/directors/search", response_model=DirectorResponse)
async def director_search(q: str = Query(..., description="Director name, typos allowed")):
	"""Fuzzy-match a director and return their films with a rating summary."""
	analysis = require_analysis()
	try:
		match = analysis.find_director(q)
	except ValueError as e:
		raise HTTPException(status_code=422, detail=str(e))
	if match is None:
		raise HTTPException(status_code=404, detail=f"No director matching '{q}'")
	logger.info(f"[API] /directors/search '{q}' -> '{match.director}' ({len(match.films)} films)")
	return DirectorResponse(
		query=q,
		director=match.director,
		score=round(match.score, 1),
		summary=group_out(match.summary) if match.summary else None,
		films=[film_out(f) for f in match.films],
	)
