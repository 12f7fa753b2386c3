"""Network configuration constants for the exam portal."""

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 8000
DEFAULT_SERVER_URL: str = "http://127.0.0.1:8000"
REQUEST_TIMEOUT_SECONDS: float = 10.0
