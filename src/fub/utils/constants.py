"""Constants used throughout fub."""

# Return codes of the menu contract
QUIT_CODE = 130
HELP_CODE = 126

# Secondary read timeouts (in seconds)
ESCAPE_TIMEOUT = 0.1
DIGIT_TIMEOUT = 0.2

# Longest escape sequence read before giving up, ESC included
MAX_ESCAPE_LENGTH = 16

# Display defaults
DEFAULT_MENU_HEIGHT = 10
DEFAULT_SCROLL_THRESHOLD = 5
DEFAULT_PROGRESS_WIDTH = 40

# Spinner
DEFAULT_SPINNER_DELAY = 0.1
SPINNER_FRAMES = ("⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏")

# External helper
DEFAULT_EXTERNAL_COMMAND = "gum"
EXTERNAL_PROBE_TIMEOUT = 2.0
# Consecutive failures before the helper is disabled for the session
MAX_EXTERNAL_FAILURES = 3

# Variables the helper reads as styling; scrubbed around each invocation
EXTERNAL_STYLE_VARS = (
    "BOLD",
    "DIM",
    "ITALIC",
    "UNDERLINE",
    "RESET",
    "FOREGROUND",
    "BACKGROUND",
    "BORDER_FOREGROUND",
)

# Sentinel options appended to external single-select menus
QUIT_OPTION = "❌ Quit"
HELP_OPTION = "❓ Help"
