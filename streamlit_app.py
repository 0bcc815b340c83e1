"""
Streamlit UI for the Film Ratings Analysis.
Calls the local FastAPI server at http://localhost:8000 to fetch summary tables,
or runs locally by loading the spreadsheet like the API does.

Run API (optional):   uvicorn api:app --reload
Run UI:                streamlit run streamlit_app.py
"""

# Environment lookup for the data path shared with the API
import os  # FILM_DATA_PATH setting
# HTTP client to call the API when running in API mode
import requests  # make web requests to the FastAPI server
# Streamlit framework to build a simple interactive UI
import streamlit as st  # UI primitives
# pandas turns payloads into tables/charts Streamlit can draw
import pandas as pd  # tabular display
# Typing to make function signatures clearer
from typing import Optional  # indicates values can be None

# Local imports for fallback/local mode (when API isn't used)
from src.data_loader import DataLoader  # load films from file
from src.analysis import FilmAnalysis  # summaries + lookups

# Default URL where the FastAPI server is expected to run locally
DEFAULT_API_URL = "http://localhost:8000"  # default API base URL
DEFAULT_DATA_PATH = os.getenv('FILM_DATA_PATH', 'data/films.csv')  # same default as the API

# Configure Streamlit page (title and layout width)
st.set_page_config(page_title="Film Ratings Analysis", layout="wide")  # wide layout

# Main page title
st.title("🎬 Film Ratings – What Do My Stars Say?")  # friendly header


# Cache the local analysis so we only read the sheet once per session
@st.cache_resource(show_spinner=True)
def init_local_analysis(data_path: str) -> Optional[FilmAnalysis]:
	"""Load and normalize the spreadsheet for local mode."""
	try:
		films = DataLoader().load_films(data_path)  # read + normalize
		return FilmAnalysis(films)  # success
	except (FileNotFoundError, ValueError) as e:
		# Show an error in the UI so users know local mode failed
		st.error(f"Failed to load films locally: {e}")
		return None  # signal failure


def group_rows(groups) -> pd.DataFrame:
	"""Summary rows (dataclasses or API dicts) -> display table."""
	rows = [g if isinstance(g, dict) else g.__dict__ for g in groups]
	df = pd.DataFrame(rows, columns=['key', 'mean', 'count', 'rated_count', 'cv'])
	return df.rename(columns={
		'key': 'Group',
		'mean': 'Mean rating',
		'count': 'Films',
		'rated_count': 'Rated',
		'cv': 'CV',
	})


# Sidebar contains configuration controls
with st.sidebar:
	st.header("Settings")  # section label
	min_count = st.slider("Minimum films per director", min_value=1, max_value=10, value=4)  # director threshold
	sort_by = st.selectbox("Sort directors by", ["mean", "cv", "count"])  # director ordering
	include_co = st.toggle("Count co-directors", value=False)  # multi-director films
	api_url = st.text_input("API URL", DEFAULT_API_URL)  # where the API lives
	data_path = st.text_input("Local data file", DEFAULT_DATA_PATH)  # sheet for local mode
	use_local = st.toggle("Use local analysis", value=False, help="If enabled or API is unreachable, the app will run fully locally.")

# If not forcing local, check quickly whether the API is reachable
api_available = False  # default assumption
if not use_local:
	try:
		h = requests.get(f"{api_url}/health", timeout=3)  # ping API health endpoint
		api_available = h.ok and h.json().get('data_ready', False)  # up and loaded
	except requests.RequestException:
		api_available = False  # probe failed
		st.sidebar.info("API not reachable; will use local analysis.")  # inform user

# Initialize local analysis only when needed (user toggle or API not available)
local: Optional[FilmAnalysis] = None  # placeholder
if use_local or not api_available:
	with st.spinner("Loading films locally..."):
		local = init_local_analysis(data_path)
		if local is not None:
			st.sidebar.success("Local analysis ready.")  # success note
		else:
			st.sidebar.error("Local analysis failed to initialize.")  # error note
			st.stop()

try:
	if local is not None:
		# Local mode: compute everything in this process
		counts, missing = local.distribution()
		distribution = pd.DataFrame({'Films': list(counts.values())}, index=[str(k) for k in counts])
		decades = group_rows(local.decades())
		runtimes = group_rows(local.runtimes())
		directors = group_rows(local.directors(min_count=min_count, sort_by=sort_by, include_co_directors=include_co))
		corr = pd.DataFrame([p.__dict__ for p in local.correlations_with('rating')])
	else:
		# API mode: let the server do the work
		def get(path, **params):
			resp = requests.get(f"{api_url}{path}", params=params, timeout=30)
			resp.raise_for_status()  # raise error if server responded with an error code
			return resp.json()

		dist = get("/distribution")
		missing = dist['missing']
		distribution = pd.DataFrame(
			{'Films': [i['films'] for i in dist['items']]},
			index=[str(i['rating']) for i in dist['items']],
		)
		decades = group_rows(get("/summary/decades")['groups'])
		runtimes = group_rows(get("/summary/runtimes")['groups'])
		directors = group_rows(get(
			"/summary/directors", min_count=min_count, sort_by=sort_by, include_co_directors=include_co,
		)['groups'])
		corr = pd.DataFrame(get("/correlations", target='rating'))

	# Rating distribution bar chart
	st.subheader("Rating distribution")
	st.bar_chart(distribution)
	st.caption(f"{missing} films without a rating")
	st.divider()  # visual separator

	col1, col2 = st.columns(2)  # decade and runtime side by side
	with col1:
		st.subheader("By decade")
		st.dataframe(decades, hide_index=True)
		st.bar_chart(decades.set_index('Group')['Mean rating'])
	with col2:
		st.subheader("By runtime")
		st.dataframe(runtimes, hide_index=True)
		st.bar_chart(runtimes.set_index('Group')['Mean rating'])
	st.divider()

	st.subheader(f"Directors with at least {min_count} films")
	st.dataframe(directors, hide_index=True)
	st.divider()

	st.subheader("What tracks my rating?")
	st.dataframe(corr, hide_index=True)

except requests.RequestException as e:  # network/API errors
	st.error(f"API request failed: {e}")  # show human-friendly message
except ValueError as e:  # bad parameter combination
	st.error(f"Analysis failed: {e}")  # show error

# Show a footer indicator of current mode
st.sidebar.markdown("---")  # separator
if local is not None:
	st.sidebar.caption(f"Mode: Local analysis ({data_path})")  # mode label
else:
	st.sidebar.caption("Mode: API client (ensure uvicorn api:app --reload is running)")  # mode label
