"""Runtime configuration read from the process environment.

Values are read each time :meth:`ConversionSettings.from_env` is called so a
service picks up a rotated key on the next request.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .core.exceptions import ServiceMisconfiguredError

CLOUDCONVERT_API_KEY_ENV = "CLOUDCONVERT_API_KEY"
PDFCO_API_KEY_ENV = "PDFCO_API_KEY"
PROVIDER_ENV = "PDFDESK_CONVERSION_PROVIDER"

PROVIDERS = ("cloudconvert", "pdfco")
DEFAULT_PROVIDER = "cloudconvert"


def _read_secret(env_name: str) -> str | None:
    value = os.getenv(env_name)
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class ConversionSettings:
    """Settings for the remote Excel to PDF conversion service."""

    provider: str = DEFAULT_PROVIDER
    cloudconvert_api_key: str | None = None
    pdfco_api_key: str | None = None

    @classmethod
    def from_env(cls) -> "ConversionSettings":
        provider = (os.getenv(PROVIDER_ENV) or DEFAULT_PROVIDER).strip().lower()
        if provider not in PROVIDERS:
            raise ServiceMisconfiguredError(
                f"{PROVIDER_ENV} must be one of {', '.join(PROVIDERS)}; got {provider!r}"
            )
        return cls(
            provider=provider,
            cloudconvert_api_key=_read_secret(CLOUDCONVERT_API_KEY_ENV),
            pdfco_api_key=_read_secret(PDFCO_API_KEY_ENV),
        )

    @property
    def api_key(self) -> str | None:
        """Return the credential of the selected provider."""

        if self.provider == "pdfco":
            return self.pdfco_api_key
        return self.cloudconvert_api_key


__all__ = [
    "CLOUDCONVERT_API_KEY_ENV",
    "PDFCO_API_KEY_ENV",
    "PROVIDER_ENV",
    "PROVIDERS",
    "ConversionSettings",
]
