"""
Shared constants for wordchain.
"""

START_INDEX = 0
END_INDEX = 0xFFFFFFFF
ROW_COUNT_MAX = 0xFFFFFFFF
TABLE_LENGTH_MAX = 0xFFFFFFFF
TOKEN_BYTES_MAX = 0xFF
MAX_ROWS = END_INDEX
PROBABILITY_TOLERANCE = 1e-9
