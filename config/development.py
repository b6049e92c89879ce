import os

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///punchclock.sqlite")

WORK_DURATION = os.getenv("WORK_DURATION", "8h")
LUNCH_WINDOW = os.getenv("LUNCH_WINDOW", "12:30-14:00")
MIN_LUNCH = os.getenv("MIN_LUNCH", "30")
MAX_LUNCH = os.getenv("MAX_LUNCH", "90")
DEFAULT_POSITION = os.getenv("DEFAULT_POSITION", "O")
AUTO_LUNCH = os.getenv("AUTO_LUNCH", "0")
SURPLUS_STRATEGY = os.getenv("SURPLUS_STRATEGY", "pairs")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply the schema on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
