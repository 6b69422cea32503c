"""
Configuration settings for Clash of Isles.
"""
import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# Window settings
WINDOW_WIDTH = 1280
WINDOW_HEIGHT = 720
FPS = 60
PROTOTYPE_VERSION = "1.0.0"
GAME_TITLE = f"Clash of Isles (Prototype v{PROTOTYPE_VERSION})"

# Top-down view: world units -> pixels
PIXELS_PER_UNIT = 16
PLACEMENT_HALF_EXTENT = 20  # placement plane spans [-20, 20] on x and z
BUILDING_FOOTPRINT = 2  # world units per side

# Colors
COLOR_SEA = (30, 144, 255)
COLOR_ISLAND = (75, 122, 41)
COLOR_GRID = (88, 138, 54)
COLOR_UI_BG = (40, 40, 50)
COLOR_UI_BORDER = (80, 80, 100)
COLOR_TIMBER = (222, 184, 135)
COLOR_WHITE = (255, 255, 255)
COLOR_BLACK = (0, 0, 0)
COLOR_RED = (220, 20, 60)
COLOR_GREEN = (50, 205, 50)

BUILDING_COLORS = {
    "hut": (139, 69, 19),
    "mill": (204, 204, 204),
}

ISLAND_RADIUS = 22  # world units

# Building settings
BUILDING_COSTS = {
    "hut": 10,
    "mill": 30,
}

# Upgrade cost = floor(base * UPGRADE_COST_GROWTH ** current_level)
UPGRADE_BASE_COSTS = {
    "hut": 8,
    "mill": 25,
}
UPGRADE_COST_GROWTH = 1.7

# Economy settings
STARTING_TIMBER = 50
HUT_BASE_RATE = 0.2  # per second, shared by every hut
HUT_LEVEL_BONUS = 0.05  # added to the shared hut rate per level above 1
MILL_RATE = 0.6
TRANSACTION_LOG_LIMIT = 200

# Tide settings
TIDE_STATES = ("Low", "Mid", "High")
TIDE_RATE_MULTIPLIERS = {
    "Low": 1.10,
    "Mid": 1.0,
    "High": 0.90,
}
TIDE_CYCLE_SECONDS = float(os.getenv("ISLES_TIDE_CYCLE_SECONDS", "40"))

# Accrual clock
ACCRUAL_PERIOD_MS = 1000

# Raid settings
RAID_DURATION_MS = 20000
RAID_POLL_MS = 200
RAID_HIT_REWARD = 2
RAID_MIN_REWARD = 5
RAID_SCORE_MULTIPLIER = 2
RAID_PER_BUILDING_REWARD = 1

# Persistence
SAVE_SLOT = os.getenv("ISLES_SAVE_SLOT", "clash_of_isles_save_v1")
SAVE_DIR = os.getenv("ISLES_SAVE_DIR", os.path.join(os.path.expanduser("~"), ".clash_of_isles"))
SAVE_PLACEHOLDER_Y = 4.0  # presentation-only height written into saved positions

# Simulation time
# When enabled, gameplay time advances from frame dt instead of pygame's wall-clock ticks.
DETERMINISTIC_SIM = _env_bool("ISLES_DETERMINISTIC_SIM", False)

# Audio
AUDIO_ENABLED = _env_bool("ISLES_AUDIO", True)
AMBIENT_MASTER_GAIN = 0.12

# Logging
LOG_LEVEL = os.getenv("ISLES_LOG_LEVEL", "INFO")
