"""Constants used throughout Got."""

# Directory names
GOT_DIR = ".got"
OBJECTS_DIR = "objects"
REFS_DIR = "refs"

# File names
HEAD_FILE = "HEAD"
IGNORE_FILE = ".gotignore"
DEFAULT_HEAD_REF = "ref: refs/heads/main\n"

# Names never included in a tree build
DEFAULT_IGNORE_NAMES = frozenset({GOT_DIR})

# Hash algorithm
HASH_ALGORITHM = "sha1"
HASH_LENGTH = 40  # hex characters
RAW_HASH_LENGTH = 20  # bytes, as stored inside tree and commit payloads
MIN_PREFIX_LENGTH = 4

# Trees nested deeper than this are rejected
MAX_TREE_DEPTH = 256

# Environment
AUTHOR_ENV_VAR = "GOT_AUTHOR"

# Exit codes
EXIT_USER_ERROR = 1
EXIT_SYSTEM_ERROR = 2
EXIT_DATA_ERROR = 3
