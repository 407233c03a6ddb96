"""Runtime settings for the encoder service.

Every setting comes from an EE_* environment variable. A backend/.env file
is read first; variables already present in the environment take priority.
"""

import os
from pathlib import Path

_ENV_FILE = Path(__file__).parent.parent / ".env"


def _load_dotenv(path: Path = _ENV_FILE):
    """Copy KEY=value lines from path into os.environ without overriding."""
    if not path.is_file():
        return
    for raw in path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        os.environ.setdefault(key.strip(), value.strip().strip("'\""))


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("1", "true", "yes")


def _env_int(name: str, default: int) -> int:
    return int(os.environ.get(name, str(default)))


_load_dotenv()


APP_NAME: str = "Entity Encoder"
APP_VERSION: str = "0.1.0"

HOST: str = os.environ.get("EE_HOST", "127.0.0.1")
PORT: int = _env_int("EE_PORT", 8000)

# "json" emits one JSON object per line; anything else is plain text
LOG_LEVEL: str = os.environ.get("EE_LOG_LEVEL", "info")
LOG_FORMAT: str = os.environ.get("EE_LOG_FORMAT", "text")

# Log one line per /api/ request
REQUEST_LOG: bool = _env_flag("EE_REQUEST_LOG")

# Characters accepted per encode request; a batch counts the sum of its texts
MAX_TEXT_LENGTH: int = _env_int("EE_MAX_TEXT_LENGTH", 1_000_000)
