import re


# Category ids follow the 24-hex ObjectId convention
OBJECT_ID_PATTERN = r"^[0-9a-fA-F]{24}$"
OBJECT_ID_RE = re.compile(OBJECT_ID_PATTERN)

# Sentinel accepted in place of a category id meaning "no restriction"
ALL_CATEGORIES = "all"

CATEGORY_NAME_MIN = 2
CATEGORY_NAME_MAX = 100
CATEGORY_NAME_PATTERN = r"^[a-zA-Z0-9\s\-&]+$"
CATEGORY_DESCRIPTION_MIN = 10
CATEGORY_DESCRIPTION_MAX = 500
SORT_ORDER_MIN = 0
SORT_ORDER_MAX = 9999

TREE_MAX_DEPTH_LIMIT = 10
SEARCH_RESULT_LIMIT = 50
PATH_SEPARATOR = " > "

CATEGORY_CACHE_PREFIX = "categories"
