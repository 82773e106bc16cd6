import os
from dotenv import load_dotenv

load_dotenv()

TOKEN = os.getenv("BOT_TOKEN")
UTM_ZONE = int(os.getenv("UTM_ZONE", "30"))
UTM_HEMISPHERE = os.getenv("UTM_HEMISPHERE", "N")
LOG_FILE = os.getenv("LOG_FILE", "coordsuite.log")

# Zaragoza
DEFAULT_LAT = 41.651285
DEFAULT_LON = -0.869147

SINGLE_POINT_ZOOM = 15
VIEWPORT_PADDING = 1.3

# |second value| above this means easting/northing, not degrees
UTM_THRESHOLD = 1000.0

MIN_EASTING = 100_000.0
MAX_EASTING = 1_000_000.0
MAX_NORTHING = 10_000_000.0
