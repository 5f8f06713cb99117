"""Default configuration values."""

DEFAULT_API_BASE_URL = "http://localhost:3000"
DEFAULT_REQUEST_TIMEOUT = 30.0  # seconds

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8000
DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"

# Config file discovery
CONFIG_DIR_NAME = ".chat-artifacts"
PROJECT_CONFIG_FILENAMES = ("chat-artifacts.jsonc", "chat-artifacts.json")
GLOBAL_CONFIG_FILENAME = "config.jsonc"

# Client-side preferences file, stored under the config directory
PREFERENCES_FILENAME = "preferences.json"
