# Interaction log
LOG_CAPACITY = 100  # most-recent events kept, oldest evicted first

# Weight of an interaction when inferring category/tag preferences.
ACTION_WEIGHTS = {
    "purchase": 3,
    "cart": 2,
}
DEFAULT_ACTION_WEIGHT = 1  # view, search

# Personalized scoring: bonus multiplied by (n - rank) of the preferred category/tag
CATEGORY_RANK_POINTS = 10
TAG_RANK_POINTS = 5
NOVELTY_BONUS = 2  # product the user never interacted with

# Related products scoring
RELATED_CATEGORY_MATCH = 20
RELATED_TAG_MATCH = 10

# Trending
TRENDING_WINDOW_DAYS = 7

DEFAULT_LIMIT = 5
