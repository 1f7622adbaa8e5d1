import os

# Project root directory (techmatrix/)
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# Per-symbol technical analysis snapshot storage (one JSON document per symbol)
SNAPSHOT_DATA_DIR = os.getenv("TECHMATRIX_DATA_DIR", os.path.join(BASE_DIR, "data", "snapshots"))

# Log files for console runs and the UI adapter
LOGS_DIR = os.getenv("TECHMATRIX_LOGS_DIR", os.path.join(BASE_DIR, "logs"))

# Placeholder rendered for missing indicator values
NA_TEXT = "N/A"

# Candidate periods for the EMA/SMA rows of the moving averages section
MOVING_AVERAGE_PERIODS = (9, 20, 21, 50, 96, 200)

# Trend classes assigned per cell and the CSS tokens the frontend paints them with
TREND_INCREASE = "increase"
TREND_DECREASE = "decrease"
TREND_FLAT = "flat"
TREND_CSS_CLASSES = {
    TREND_INCREASE: "bg-green-50",
    TREND_DECREASE: "bg-red-50",
    TREND_FLAT: "bg-gray-50",
}

# Local UI server defaults
UI_HOST = os.getenv("TECHMATRIX_HOST", "127.0.0.1")
UI_PORT = int(os.getenv("TECHMATRIX_PORT", "5000"))

# Snapshots older than this are reported as stale by the health check
STALE_SNAPSHOT_DAYS = 3

# Ensure required local directories exist
os.makedirs(SNAPSHOT_DATA_DIR, exist_ok=True)
os.makedirs(LOGS_DIR, exist_ok=True)
