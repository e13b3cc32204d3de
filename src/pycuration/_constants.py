"""Internal constants shared across the library."""

REWARDS_BASE_URL = "https://sds.steemworld.org"
CURATION_REWARDS_PATH = "/rewards_api/getRewards/curation_reward"
USER_AGENT = "pycuration/0 (+aiohttp)"

#: HTTP status the post resolver reports when the node is overloaded.
SERVICE_UNAVAILABLE = 503

ONE_DAY_MS = 24 * 60 * 60 * 1000

# Vote rshares are reported in raw units; reward tables use millions.
RSHARES_SCALE = 1_000_000
# Vote percent is expressed in hundredths of a percent (10000 == 100%).
VOTE_PERCENT_SCALE = 10_000

# ------------------------------------------------------------------
# Chart presentation
# ------------------------------------------------------------------

MEAN_LINE_ID = "mean-line"
MEDIAN_LINE_ID = "median-line"
GUIDE_LINE_IDS: tuple[str, ...] = (MEAN_LINE_ID, MEDIAN_LINE_ID)

POINT_COLOR = "rgba(22, 216, 174, 0.40)"
SAME_AUTHOR_COLOR = "rgba(180, 53, 42, 0.75)"
MEAN_LINE_COLOR = "rgba(107,114,128,0.8)"
MEDIAN_LINE_COLOR = "rgba(55,65,81,0.9)"
