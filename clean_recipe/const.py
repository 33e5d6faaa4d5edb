"""Constants for the Clean Recipe extractor."""

# Providers
PROVIDER_OPENAI = "openai"
PROVIDER_GOOGLE = "google"
PROVIDER_ANTHROPIC = "anthropic"

PROVIDERS = [PROVIDER_OPENAI, PROVIDER_GOOGLE, PROVIDER_ANTHROPIC]

PROVIDER_NAMES = {
    PROVIDER_OPENAI: "OpenAI",
    PROVIDER_GOOGLE: "Google AI",
    PROVIDER_ANTHROPIC: "Anthropic",
}

# Available models (id, display name, provider)
LLM_MODELS = [
    ("gpt-4o", "GPT-4o", PROVIDER_OPENAI),
    ("gpt-4.1", "GPT-4.1", PROVIDER_OPENAI),
    ("gemini-2.0-flash", "Gemini 2.0 Flash", PROVIDER_GOOGLE),
    ("gemini-2.5-pro", "Gemini 2.5 Pro", PROVIDER_GOOGLE),
    ("claude-sonnet-4-20250514", "Claude 4 Sonnet", PROVIDER_ANTHROPIC),
    ("claude-opus-4-20250514", "Claude 4 Opus", PROVIDER_ANTHROPIC),
    ("claude-4-haiku", "Claude 4 Haiku", PROVIDER_ANTHROPIC),
]

DEFAULT_MODEL = "gemini-2.0-flash"

# Endpoints
FIRECRAWL_SCRAPE_URL = "https://api.firecrawl.dev/v1/scrape"
OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"
GOOGLE_GENERATE_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
ANTHROPIC_MESSAGES_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"

# Default values
DEFAULT_SCRAPE_TIMEOUT = 30
DEFAULT_LLM_TIMEOUT = 120
DEFAULT_TEMPERATURE = 0.1
DEFAULT_MAX_TOKENS = 4096
DEFAULT_MAX_TEXT_LENGTH = 15000
TRUNCATION_MARKER = "\n\n[Content truncated...]"
DEFAULT_SERVINGS = 4
MIN_SERVINGS = 1
MAX_SERVINGS = 99

# Alternative measurements
MAX_ALTERNATIVES = 4
MAX_CONVERSIONS = 3
FRACTION_TOLERANCE = 0.05

# Storage
MAX_STORED_RECIPES = 20
STORAGE_KEY_API_KEYS = "recipe-extractor-api-keys"  # legacy single-provider record
STORAGE_KEY_SETTINGS = "recipe-extractor-settings-v2"
STORAGE_KEY_RECIPES = "recipe-extractor-recipes"
STORAGE_KEY_PROGRESS = "recipe-extractor-progress-v1"
STORAGE_KEY_CURRENT_SESSION = "recipe-extractor-current-session"

MODE_OVERVIEW = "overview"
MODE_COOKING = "cooking"

# Environment variables
ENV_FIRECRAWL_API_KEY = "FIRECRAWL_API_KEY"
ENV_OPENAI_API_KEY = "OPENAI_API_KEY"
ENV_GOOGLE_API_KEY = "GOOGLE_API_KEY"
ENV_GEMINI_API_KEY = "GEMINI_API_KEY"
ENV_ANTHROPIC_API_KEY = "ANTHROPIC_API_KEY"
ENV_MODEL = "RECIPE_MODEL"
