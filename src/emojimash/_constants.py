"""Internal constants shared across the library."""

METADATA_URL = "https://raw.githubusercontent.com/xsalazar/emoji-kitchen-backend/main/app/metadata.json"
USER_AGENT = "emojimash/1"
ARCHIVE_NAME = "metadata.json"
PAIR_SEPARATOR = "_"

DEFAULT_HOST = "0.0.0.0"  # noqa: S104
DEFAULT_PORT = 21387
DEFAULT_FETCH_TIMEOUT: float = 60.0

# Keys of the upstream metadata document.
DATA_KEY = "data"
EMOJI_KEY = "emoji"
COMBINATIONS_KEY = "combinations"
