import os
from dotenv import load_dotenv

load_dotenv()

def env(key: str, default: str | None = None) -> str | None:
    return os.getenv(key, default)

def env_float(key: str, default: float) -> float:
    raw = env(key)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default

REQUEST_TIMEOUT_S = env_float("PLAYGROUND_TIMEOUT_S", 60.0)
MAX_TARGETS = 3
LOG_LEVEL = env("PLAYGROUND_LOG_LEVEL", "WARNING")

OPENAI_BASE_URL = env("OPENAI_BASE_URL", "https://api.openai.com/v1")
ANTHROPIC_BASE_URL = env("ANTHROPIC_BASE_URL", "https://api.anthropic.com")
GEMINI_BASE_URL = env("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com")

ANTHROPIC_VERSION = "2023-06-01"
ANTHROPIC_MAX_TOKENS = 1024
ANTHROPIC_SYSTEM_PROMPT = "You are Claude, a helpful AI assistant."

# Only used by the CLI to pre-fill targets; the gateway takes credentials per target.
OPENAI_API_KEY = env("OPENAI_API_KEY")
ANTHROPIC_API_KEY = env("ANTHROPIC_API_KEY")
GEMINI_API_KEY = env("GEMINI_API_KEY")

OPENAI_MODEL = env("OPENAI_MODEL")
ANTHROPIC_MODEL = env("ANTHROPIC_MODEL")
GEMINI_MODEL = env("GEMINI_MODEL")
