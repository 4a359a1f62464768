"""
Configuration for URI signing.

Supports:
- Dataclass defaults
- Dictionary / YAML file configuration
- Runtime overrides via dataclasses.replace
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

# Reserved query parameters (wire format)
EXPIRES_AT_KEY = "_expires"
SINGLE_USE_TOKEN_KEY = "_token"
DEFAULT_PARAMETER = "_hash"

RESERVED_KEYS = frozenset({EXPIRES_AT_KEY, SINGLE_USE_TOKEN_KEY})

BACKEND_AUTO = "auto"
BACKEND_CRYPTOGRAPHY = "cryptography"
BACKEND_HASHLIB = "hashlib"
BACKENDS = (BACKEND_AUTO, BACKEND_CRYPTOGRAPHY, BACKEND_HASHLIB)


@dataclass(frozen=True)
class SigningConfig:
    """
    Configuration for signers created from raw secrets.

    Defaults:
    - parameter: "_hash" (primary MAC query key)
    - algorithm: "sha256"
    - backend: "auto" (cryptography when installed, else hashlib)
    """

    parameter: str = DEFAULT_PARAMETER
    algorithm: str = "sha256"
    backend: str = BACKEND_AUTO

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not self.parameter:
            raise ValueError("parameter must not be empty")

        if self.parameter in RESERVED_KEYS:
            raise ValueError(f"parameter {self.parameter!r} is reserved")

        if not self.algorithm:
            raise ValueError("algorithm must not be empty")

        if self.backend not in BACKENDS:
            raise ValueError(f"backend must be one of {', '.join(BACKENDS)}, got {self.backend!r}")

    def with_overrides(self, **overrides: Any) -> SigningConfig:
        """Return a copy with the given fields replaced."""
        return replace(self, **overrides)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SigningConfig:
        """Create configuration from dictionary (e.g., YAML)."""
        return cls(
            parameter=data.get("parameter", DEFAULT_PARAMETER),
            algorithm=str(data.get("algorithm", "sha256")).lower(),
            backend=str(data.get("backend", BACKEND_AUTO)).lower(),
        )

    @classmethod
    def from_yaml(cls, path: Path | str) -> SigningConfig:
        """Load configuration from a YAML file.

        The file may hold the settings at top level or under a
        ``signeduri:`` section.
        """
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Invalid signing config in {path}: expected a mapping")

        section = data.get("signeduri", data)
        if not isinstance(section, dict):
            raise ValueError(f"Invalid signing config in {path}: 'signeduri' must be a mapping")

        return cls.from_dict(section)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "parameter": self.parameter,
            "algorithm": self.algorithm,
            "backend": self.backend,
        }


DEFAULT_CONFIG = SigningConfig()
