from . import __version__

DEFAULT_BASE_URL = "http://localhost:8000"
PARTITION_PATH = "/general/v0/general"

# hi_res partitioning of a large PDF can take minutes
DEFAULT_TIMEOUT = 120.0

API_KEY_HEADER = "unstructured-api-key"
USER_AGENT = f"unstructured-client-python/{__version__}"
