"""
Static server configuration
Defaults come from the environment (and an optional .env file) like the other services
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

DEFAULT_PORT = 8000
DEFAULT_MAX_PORT_ATTEMPTS = 100

PACKAGE_DIR = Path(__file__).parent
BUNDLED_KEY = PACKAGE_DIR / "private.key"
BUNDLED_CERT = PACKAGE_DIR / "public.cert"


# Load .env file if it exists
def load_env_file(env_path=".env"):
    """Load environment variables from .env file"""
    if os.path.exists(env_path):
        with open(env_path, 'r') as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith('#') and '=' in line:
                    key, value = line.split('=', 1)
                    # Only set if not already in environment
                    if key not in os.environ:
                        os.environ[key] = value


# Load .env from current directory or parent directories
for env_file in [".env", "../.env", "../../.env"]:
    if os.path.exists(env_file):
        load_env_file(env_file)
        break


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name, "")
    return int(value) if value.strip() else default


@dataclass(frozen=True)
class ServerConfig:
    """Options for one bootstrap call"""
    # Static roots
    root: Optional[str] = None
    project_root: Optional[str] = None

    # Listener settings; port 0/None falls back to APP_PORT, then 8000
    port: Optional[int] = None
    host: str = field(default_factory=lambda: os.getenv("APP_HOST", "0.0.0.0"))
    max_port_attempts: int = field(
        default_factory=lambda: _env_int("STATIC_MAX_PORT_ATTEMPTS", DEFAULT_MAX_PORT_ATTEMPTS)
    )

    # Output
    no_log_output: bool = False
    no_server_info: bool = False

    # TLS settings; credentials default to the pair shipped with the package
    use_https: bool = False
    ssl_cert_path: str = field(default_factory=lambda: os.getenv("APP_SSL_CERT", str(BUNDLED_CERT)))
    ssl_key_path: str = field(default_factory=lambda: os.getenv("APP_SSL_KEY", str(BUNDLED_KEY)))

    # Collaborators
    router: Any = None
    events: Any = None

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    @property
    def resolved_port(self) -> int:
        """Requested port, defaulting when unset or falsy"""
        return self.port or _env_int("APP_PORT", DEFAULT_PORT)

    @property
    def scheme(self) -> str:
        return "https" if self.use_https else "http"
