"""Constants and defaults.

Note: Keep constants here to avoid magic strings spread across code.
"""

# Label pair used when a cross-student row covers every subject of the class.
OVERALL_SUBJECT_CODE = "-"
OVERALL_SUBJECT_NAME = "Overall"

# Placeholder for blank labels.
MISSING_LABEL = "-"

SORT_ASCENDING = "asc"

PERCENT_DECIMALS = 2

PARTIAL_REQUEST_HEADER = "X-Requested-With"
PARTIAL_REQUEST_VALUE = "XMLHttpRequest"
