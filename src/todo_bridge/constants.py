"""Application constants."""

# Filter modes
FILTER_ALL = "All"
FILTER_COMPLETED = "Completed"
FILTER_PENDING = "Pending"

# Edit modes (derived from editing_id)
MODE_CREATE = "create"
MODE_EDIT = "edit"

# Default configuration values
DEFAULT_API_URL = "https://api-for-todo.onrender.com/tasks"
DEFAULT_DISPLAY_TIMEZONE = "UTC"
DEFAULT_LOG_LEVEL = "INFO"

# Remote store requests
JSON_HEADERS = {"Content-Type": "application/json"}
