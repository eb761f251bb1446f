from pathlib import Path

# Base project directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Data directories
DATA_DIR = PROJECT_ROOT / "data"
RAW_DATA_DIR = DATA_DIR / "raw"
PROCESSED_DATA_DIR = DATA_DIR / "processed"

# Logging
LOG_DIR = PROJECT_ROOT / "logs"
LOG_FILE_NAME = "vp_planner.log"
LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 3
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Team colors in tie-break order (earlier color wins a tied score)
TEAM_COLORS = ("red", "blue", "green")

REGIONS = ("na", "eu")

# Match timing
SKIRMISH_DURATION_HOURS = 2
SKIRMISHES_PER_DAY = 12
MATCH_DURATION_DAYS = 7
TOTAL_SKIRMISHES_PER_MATCH = SKIRMISHES_PER_DAY * MATCH_DURATION_DAYS  # 84

# Time windows (UTC hours, start inclusive, end exclusive).
# Both regions use the same bounds; only the test order differs.
TIME_WINDOWS = ("naPrime", "euPrime", "ocx", "offHours")

PRIME_TIME_WINDOWS = {
    "naPrime": {
        "name": "NA Prime Time",
        "description": "7 PM - 12 AM ET",
        "utc_hour_start": 0,
        "utc_hour_end": 5,
    },
    "euPrime": {
        "name": "EU Prime Time",
        "description": "7 PM - 12 AM CET",
        "utc_hour_start": 18,
        "utc_hour_end": 23,
    },
    "ocx": {
        "name": "OCX/SEA Coverage",
        "description": "7 PM - 12 AM AEDT",
        "utc_hour_start": 8,
        "utc_hour_end": 13,
    },
}

OFF_HOURS_WINDOW = {
    "name": "Off Hours",
    "description": "All other times",
    "utc_hour_start": 0,
    "utc_hour_end": 24,
}

WINDOW_CHECK_ORDER = {
    "na": ("naPrime", "euPrime", "ocx"),
    "eu": ("euPrime", "naPrime", "ocx"),
}

# VP awards per 2-hour UTC block: (start_hour, end_hour, (first, second, third), tier)
VP_SCHEDULES = {
    "eu": [
        (0, 8, (15, 14, 12), "low"),
        (8, 14, (22, 18, 14), "medium"),
        (14, 18, (31, 24, 17), "high"),
        (18, 22, (51, 37, 24), "peak"),
        (22, 24, (31, 24, 17), "high"),
    ],
    "na": [
        (0, 4, (43, 32, 21), "peak"),
        (4, 6, (31, 24, 17), "high"),
        (6, 8, (23, 18, 14), "medium"),
        (8, 14, (19, 16, 13), "low"),
        (14, 22, (23, 18, 14), "medium"),
        (22, 24, (31, 24, 17), "high"),
    ],
}

# Upstream match ids look like "<region code>-<tier>"; "1" is North America
NA_REGION_CODE = "1"

# Match snapshot file name pattern (use .format(match_id=...))
MATCH_FILE_PATTERN = "match_{match_id}.json"
