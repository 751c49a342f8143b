"""UI configuration constants.

Centralizes magic numbers and configuration values for the UI module.
"""


class LogLevel:
    """Log level constants with numeric values for comparison.

    Standard logging hierarchy: DEBUG < INFO < WARNING < ERROR
    Lower numeric value = more verbose (shows more messages).
    """

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    _names = {
        DEBUG: "DEBUG",
        INFO: "INFO",
        WARNING: "WARNING",
        ERROR: "ERROR",
    }

    _from_string = {
        "debug": DEBUG,
        "info": INFO,
        "warning": WARNING,
        "error": ERROR,
    }

    @classmethod
    def name(cls, level: int) -> str:
        """Get the name for a log level."""
        return cls._names.get(level, "UNKNOWN")

    @classmethod
    def from_string(cls, level_str: str) -> int:
        """Convert string to log level. Returns DEBUG if invalid."""
        return cls._from_string.get(level_str.lower(), cls.DEBUG)


# Transcript rendering
CURSOR = "▌"  # Shown after the reply being streamed and in focused inputs
ROLE_STYLES = {
    "user": "bold cyan",
    "assistant": "white",
}

# List rendering
SELECTION_SYMBOL = "> "
ACTIVE_MODEL_MARKER = "*"

# Log panel configuration
LOG_TIMESTAMP_FORMAT = "%H:%M:%S"
LOG_MAX_MESSAGE_LENGTH = 500  # Characters before truncating log messages

WELCOME_TEXT = (
    "Start typing to talk to the active model.\n"
    "Pick a model in the Models tab, find new ones in the Search tab."
)
MODELS_EMPTY_TEXT = "No models installed. Use the Search tab to find models, then `ollama pull` one."
SEARCH_EMPTY_TEXT = "Press Enter to load popular models, or type and press Enter to search."
