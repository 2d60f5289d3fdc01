# =============================================================================
# core/config.py  —  Process configuration (subdomain, API key, data center)
# =============================================================================
#
# Three environment variables drive the adapter:
#
#   VITALLY_API_SUBDOMAIN   tenant subdomain for the US data center
#   VITALLY_API_KEY         secret token; empty or placeholder → demo mode
#   VITALLY_DATA_CENTER     "US" (default) or "EU"
#
# Loading .env files is the entry point's job (load_dotenv() in
# tools/mcp_server.py and main.py).  This module only reads os.environ, so
# tests can pass a plain dict instead.
# =============================================================================

import base64
import os
from dataclasses import dataclass
from typing import Mapping, Optional

# The value shipped in the example .env file.  Demo mode is triggered by an
# exact match, not by a "looks like a key" heuristic.
PLACEHOLDER_API_KEY = "your_api_key_here"

DEFAULT_SUBDOMAIN = "nylas"
EU_BASE_URL = "https://rest.vitally-eu.io"


@dataclass(frozen=True)
class Settings:
    """Immutable snapshot of the adapter configuration."""

    subdomain: str = DEFAULT_SUBDOMAIN
    api_key: str = ""
    data_center: str = "US"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            subdomain=env.get("VITALLY_API_SUBDOMAIN") or DEFAULT_SUBDOMAIN,
            api_key=env.get("VITALLY_API_KEY", ""),
            data_center=(env.get("VITALLY_DATA_CENTER") or "US").upper(),
        )

    @property
    def base_url(self) -> str:
        if self.data_center == "EU":
            return EU_BASE_URL
        return f"https://{self.subdomain}.rest.vitally.io"

    @property
    def demo_mode(self) -> bool:
        return not self.api_key or self.api_key == PLACEHOLDER_API_KEY

    @property
    def auth_header(self) -> str:
        # Vitally uses the key as the Basic-auth username with an empty password.
        token = base64.b64encode(f"{self.api_key}:".encode()).decode()
        return f"Basic {token}"
