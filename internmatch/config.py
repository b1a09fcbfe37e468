import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Paths (portal snapshots exported from local storage)
DATA_DIR = Path(os.getenv("INTERNMATCH_DATA_DIR", "data"))
STUDENT_PATH = DATA_DIR / "student.json"
POSTINGS_PATH = DATA_DIR / "internships.json"

# Logging
LOG_LEVEL = os.getenv("INTERNMATCH_LOG_LEVEL", "WARNING").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Tier thresholds (inclusive lower bounds, 0-100 scale)
PERFECT_THRESHOLD = 80
HIGH_THRESHOLD = 60
MEDIUM_THRESHOLD = 30

# Lowest tier that may apply to a posting
APPLY_MIN_TIER = "alta"

# Listing settings
DEFAULT_TOP_N = int(os.getenv("INTERNMATCH_TOP_N", "0")) or None
SEARCH_MATCH_THRESHOLD = 80
REMOTE_KEYWORDS = ("remoto", "remote")

# Duration buckets offered by the listing page: (min months, max months or None)
DURATION_BUCKETS = {
    "1-3 meses": (1, 3),
    "4-6 meses": (4, 6),
    "6+ meses": (6, None),
}
OPEN_ENDED_DURATION = "indefinido"
