# statscore/core/constants.py

import os
from pathlib import Path

# --- Uvicorn Configure ---
UVICORN_HOST = os.getenv("STATSCORE_HOST", "0.0.0.0")
UVICORN_LOG_LEVEL = "warning"
UVICORN_PORT = int(os.getenv("STATSCORE_PORT", "8014"))

# --- API Configure ---
# session server answers with {"id": ..., "name": ...}; UUID without hyphens
MOJANG_PROFILE_URL = os.getenv(
    "STATSCORE_MOJANG_PROFILE_URL",
    "https://sessionserver.mojang.com/session/minecraft/profile",
)
NAME_LOOKUP_TIMEOUT = float(os.getenv("STATSCORE_LOOKUP_TIMEOUT", "6"))

# --- Path Configure ---
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# --- Directory that stores All files generated ---
STORAGE_ROOT_PATH = Path(os.getenv("STATSCORE_HOME", str(BASE_DIR / "storages")))
STORAGE_ROOT_PATH.mkdir(parents=True, exist_ok=True)

# --- Host world stats directory (<uuid>.json per player, owned by the game server) ---
WORLD_STATS_PATH = Path(os.getenv("STATSCORE_WORLD_STATS", str(STORAGE_ROOT_PATH / "world" / "stats")))

# --- Host profile cache (usercache.json beside the world folder, owned by the game server) ---
SERVER_USERCACHE_PATH = Path(os.getenv("STATSCORE_USERCACHE", str(WORLD_STATS_PATH.parent.parent / "usercache.json")))

# --- Persisted state ---
CONFIG_FILE_NAME = "statscore_config.json"
USERNAME_CACHE_FILE_NAME = "playtime_usernames.json"
DAILY_PLAYTIME_FILE_NAME = "playtime_daily.json"

# --- Logger Configuration ---
LOG_LEVEL = os.getenv("STATSCORE_LOG_LEVEL", "DEBUG")
LOG_FILE_LEVEL = os.getenv("STATSCORE_LOG_FILE_LEVEL", "DEBUG")
LOG_STORAGE = STORAGE_ROOT_PATH / "logs"

# --- Daily reset ---
DEFAULT_DAILY_RESET_TIME = "00:00:00"
RESET_WATCH_INTERVAL = float(os.getenv("STATSCORE_RESET_WATCH_INTERVAL", "60"))

# --- Game clock ---
TICKS_PER_SECOND = 20
PLAY_TIME_KEYS = ("minecraft:play_time", "minecraft:play_one_minute")  # play_one_minute: pre-1.17 name

# --- Name fallback ---
UNKNOWN_NAME_PREFIX = "Unknown_"
