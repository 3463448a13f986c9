"""Tag prefixes, formats and repository limits shared across mdtask."""

# Tag prefixes
TAG_PREFIX = "mdtask"
SYSTEM_TAG_PREFIX = "mdtask/"
STATUS_TAG_PREFIX = "mdtask/status/"
ARCHIVED_TAG = "mdtask/archived"
DEADLINE_TAG_PREFIX = "mdtask/deadline/"
WAITFOR_TAG_PREFIX = "mdtask/waitfor/"
REMINDER_TAG_PREFIX = "mdtask/reminder/"
PARENT_TAG_PREFIX = "mdtask/parent/"

# Date and time formats (strftime)
DATETIME_FORMAT = "%Y-%m-%d %H:%M"
DATE_FORMAT = "%Y-%m-%d"
REMINDER_FORMAT = "%Y-%m-%dT%H:%M"
ID_TIME_FORMAT = "%Y%m%d%H%M%S"
TASK_ID_PREFIX = "task/"

# Repository
MAX_FILENAME_SUFFIX = 100
MAX_LOOKUP_SUFFIX = 10
MARKDOWN_EXTENSION = ".md"
DEFAULT_SEARCH_PATH = "."
FRONT_MATTER_DELIMITER = "---"

# Config files, in lookup order
CONFIG_FILENAME = ".mdtask.toml"
ALT_CONFIG_FILENAME = "mdtask.toml"

# ID generation
GENERATE_ID_SLEEP_SECONDS = 1.0
