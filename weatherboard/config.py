import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]

DB_PATH = os.getenv("WEATHERBOARD_DB_PATH", "data/weatherboard.db")
LOG_DIR = Path(os.getenv("WEATHERBOARD_LOG_DIR", str(PROJECT_ROOT / "logs")))
LOCAL_TZ = os.getenv("LOCAL_TZ", "America/New_York")

SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "")
BACKEND_VARS = ("SUPABASE_URL", "SUPABASE_ANON_KEY")

VOLATILITY_THRESHOLD = float(os.getenv("VOLATILITY_THRESHOLD", "5"))
READINGS_LIMIT = int(os.getenv("READINGS_LIMIT", "500"))
AUTO_REFRESH_SECONDS = int(os.getenv("AUTO_REFRESH_SECONDS", "300"))
REQUEST_TIMEOUT_SECONDS = int(os.getenv("REQUEST_TIMEOUT_SECONDS", "10"))


def missing_backend_vars(env=None) -> list[str]:
    env = os.environ if env is None else env
    return [name for name in BACKEND_VARS if not env.get(name)]


def use_managed_backend(env=None) -> bool:
    return not missing_backend_vars(env)
