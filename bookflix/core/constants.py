"""
Core constants used across the engine. Keep these simple and documented.
"""

# Reserved vocabulary entry for the model's "unknown user" bucket
UNKNOWN_USER_TOKEN: str = "[UNK]"

# Target length of the published recommendation list
RECOMMENDATION_LIST_SIZE: int = 60

# Padding and random sampling only draw from the head of the catalog
RANDOM_POOL_LIMIT: int = 1000
PADDING_MAX_ATTEMPTS: int = 1000
RANDOM_ATTEMPTS_PER_ITEM: int = 10

# Liked-item blending: picks per liked item and the offset multiplier
LIKED_PICKS_PER_ITEM: int = 3
LIKED_OFFSET_MULTIPLIER: int = 7

# Positions shown as "Top Picks"; also the prefix checked by the stability guard
TOP_PICKS_COUNT: int = 10

SEARCH_RESULT_LIMIT: int = 50

# Home feed row sizes
SIMILAR_ROW_SIZE: int = 12
POPULAR_ROW_SIZE: int = 20
TRENDING_ROW_SIZE: int = 15
PROFILE_SAMPLE_SIZE: int = 5

UNKNOWN_BOOK_TITLE: str = "Unknown Book"
