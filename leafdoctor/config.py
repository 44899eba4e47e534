import os

# =========================
# Config
# =========================
APP_NAME = "LeafDoctor (Scan + History)"
DEFAULT_LANG = os.getenv("DEFAULT_LANG", "en")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")

MODEL_NAME = os.getenv("OPENAI_MODEL", "gpt-4.1-mini")
TTS_MODEL_NAME = os.getenv("OPENAI_TTS_MODEL", "gpt-4o-audio-preview")
SEARCH_MODEL_NAME = os.getenv("OPENAI_SEARCH_MODEL", "gpt-4o-mini-search-preview")
TTS_VOICE = os.getenv("OPENAI_TTS_VOICE", "coral")

OPENAI_TIMEOUT_SECONDS = float(os.getenv("OPENAI_TIMEOUT_SECONDS", "60"))

# Max upload size (bytes)
MAX_IMAGE_BYTES = int(os.getenv("MAX_IMAGE_BYTES", str(8 * 1024 * 1024)))  # 8 MB
ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/webp")

# Speech payloads are mono 16-bit PCM
SPEECH_SAMPLE_RATE = 24000


def require_api_key() -> str:
    if not OPENAI_API_KEY:
        raise RuntimeError("OPENAI_API_KEY is not set. Export it before starting the service.")
    return OPENAI_API_KEY
