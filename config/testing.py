import os

DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///punchclock_test.sqlite")

WORK_DURATION = "8h"
LUNCH_WINDOW = "12:30-14:00"
MIN_LUNCH = 30
MAX_LUNCH = 90
DEFAULT_POSITION = "O"
AUTO_LUNCH = False
SURPLUS_STRATEGY = "pairs"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = True
