"""Constants and configuration for the caretedit engine."""

class EditorConstants:
    """Central configuration constants for the editor."""

    # Document model
    LINE_TERMINATOR = "\n"
    CARRIAGE_RETURN = "\r"
    WORD_PUNCTUATION = "(){}-+&="  # Counted as word characters alongside \w

    # Screen insets (chrome around the editable interior)
    DEFAULT_INSET_TOP = 0
    DEFAULT_INSET_RIGHT = 0
    DEFAULT_INSET_LEFT = 4  # Line-number gutter
    DEFAULT_INSET_BOTTOM = 2  # Status line and command line

    # Scrolling
    SCROLL_POLICY_MINIMAL = "minimal"
    SCROLL_POLICY_LEGACY = "legacy"
    DEFAULT_SCROLL_POLICY = SCROLL_POLICY_MINIMAL

    # File operations
    ATOMIC_SAVE_PREFIX = "."  # Prefix for temporary save files
    ATOMIC_SAVE_SUFFIX = ".tmp"  # Suffix for temporary save files

    # Settings / logging locations
    APP_NAME = "caretedit"
    APP_AUTHOR = "caretedit"
    SETTINGS_FILENAME = "settings.json"
    LOG_FILENAME = "caretedit.log"
    LOG_MAX_BYTES = 1024 * 1024
    LOG_BACKUP_COUNT = 3

    # Status messages
    SAVED_MESSAGE = "Wrote {} lines to {}"
    SAVE_FAILED_MESSAGE = "Could not write {}"
    NO_PATH_MESSAGE = "No file name"
    UNSAVED_CHANGES_MESSAGE = "Unsaved changes (use q! to discard)"
    UNKNOWN_COMMAND_MESSAGE = "Not an editor command: {}"
    INVALID_LINE_MESSAGE = "Invalid line: {}"
    PATTERN_NOT_FOUND_MESSAGE = "Pattern not found: {}"
    YANKED_MESSAGE = "{} characters yanked"
