import os

ANTHROPIC_API_KEY = os.environ.get("ANTHROPIC_API_KEY", "")
VISION_MODEL = os.environ.get("VISION_MODEL", "claude-sonnet-4-5-20250929")
EXTRACTION_ATTEMPTS = 3

BALBOA = "Balboa Pool"
ROSSI = "Rossi Pool"
HAMILTON = "Hamilton Pool"
GARFIELD = "Garfield Pool"
MISSION = "Mission Pool"
COFFMAN = "Coffman Pool"
KING = "King Pool"
SAVA = "Sava Pool"

# schedule documents published by SF Rec & Park, one per pool
POOL_URLS = [
    {
        "name": BALBOA,
        "url": "https://sfrecpark.org/DocumentCenter/View/26439/2025-Balboa-Pool-Fall-Pool-Schedule"
    },
    {
        "name": ROSSI,
        "url": "https://sfrecpark.org/DocumentCenter/View/26440/2025-Rossi-Pool-Fall-Pool-Schedule"
    },
    {
        "name": HAMILTON,
        "url": "https://sfrecpark.org/DocumentCenter/View/26441/2025-Hamilton-Pool-Fall-Pool-Schedule"
    },
    {
        "name": GARFIELD,
        "url": "https://sfrecpark.org/DocumentCenter/View/26442/2025-Garfield-Pool-Fall-Pool-Schedule"
    },
    {
        "name": MISSION,
        "url": "https://sfrecpark.org/DocumentCenter/View/26443/2025-Mission-Pool-Fall-Pool-Schedule"
    },
    {
        "name": COFFMAN,
        "url": "https://sfrecpark.org/DocumentCenter/View/26444/2025-Coffman-Pool-Fall-Pool-Schedule"
    },
    {
        "name": KING,
        "url": "https://sfrecpark.org/DocumentCenter/View/26445/2025-King-Pool-Fall-Pool-Schedule"
    },
    {
        "name": SAVA,
        "url": "https://sfrecpark.org/DocumentCenter/View/26446/2025-Sava-Pool-Fall-Pool-Schedule"
    },
]

SOURCE_LABEL = "SF Rec & Park schedule PDF"

# seconds to wait between pools so we don't hammer the document server
REQUEST_DELAY = 2

DATA_DIR = os.environ.get("DATA_DIR", "public/data")
SCHEDULE_FILE = "all-schedules.json"
SCHEDULE_DATA_SOURCE = os.environ.get("SCHEDULE_DATA_SOURCE",
                                      f"{DATA_DIR}/{SCHEDULE_FILE}")
CALENDAR_OUTPUT_FILE = os.environ.get("CALENDAR_OUTPUT_FILE", "public/index.html")
PDF_CACHE_DIR = os.environ.get("PDF_CACHE_DIR", "/tmp")

# 5 minutes
CACHE_DURATION = int(os.environ.get("CACHE_DURATION", 5 * 60))

# visible calendar window, every half hour from start to end inclusive
CALENDAR_START_HOUR = int(os.environ.get("CALENDAR_START_HOUR", 6))
CALENDAR_END_HOUR = int(os.environ.get("CALENDAR_END_HOUR", 22))

POOL_COLORS = {
    BALBOA: "#FF6B6B",
    COFFMAN: "#A8E6CF",
    GARFIELD: "#96CEB4",
    HAMILTON: "#45B7D1",
    MISSION: "#FECA57",
    KING: "#FFB347",
    "North Beach Pool": "#9B59B6",
    ROSSI: "#4ECDC4",
    SAVA: "#FF9FF3",
}

POOL_SHORTNAMES = {
    BALBOA: "Balboa",
    COFFMAN: "Coffman",
    GARFIELD: "Garfield",
    HAMILTON: "Hamilton",
    MISSION: "Mission",
    KING: "MLK",
    "North Beach Pool": "N.Beach",
    ROSSI: "Rossi",
    SAVA: "Sava",
}

DEFAULT_POOL_COLOR = "#cccccc"

# optional JSON file with {"colors": {...}, "shortnames": {...}} to extend the tables above
POOL_DISPLAY_FILE = os.environ.get("POOL_DISPLAY_FILE", "")
