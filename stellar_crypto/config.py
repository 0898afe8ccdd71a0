"""
TOML configuration for the stellar-crypto command line.

Settings come from an optional TOML file, then environment variables,
which take precedence over file values.

Usage:
    from stellar_crypto.config import load_config
    cfg = load_config("stellar-crypto.toml")
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import,no-redef]

from stellar_crypto.bip39 import bit_budget
from stellar_crypto.wordlist import LANGUAGE_ENGLISH


@dataclass
class MnemonicConfig:
    """Defaults for newly generated and recovered phrases."""
    language: str = LANGUAGE_ENGLISH
    word_count: int = 24
    verify_checksum: bool = True


@dataclass
class DerivationConfig:
    """Which accounts ``m/44'/148'/N'`` the CLI derives."""
    account_index: int = 0
    account_count: int = 1


@dataclass
class LoggingConfig:
    """Logging settings."""
    level: str = "WARNING"
    format: str = "human"   # "human" or "json"
    file: str | None = None


@dataclass
class StellarCryptoConfig:
    """Top-level configuration container."""
    mnemonic: MnemonicConfig = field(default_factory=MnemonicConfig)
    derivation: DerivationConfig = field(default_factory=DerivationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def validate(self) -> None:
        """Raise ``ValueError`` (or a subclass) for out-of-range settings."""
        for name, value in (
            ("mnemonic.word_count", self.mnemonic.word_count),
            ("derivation.account_index", self.derivation.account_index),
            ("derivation.account_count", self.derivation.account_count),
        ):
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f"{name} must be an integer, got {value!r}")
        bit_budget(self.mnemonic.word_count)
        if self.derivation.account_index < 0:
            raise ValueError("derivation.account_index must be >= 0")
        if self.derivation.account_count < 1:
            raise ValueError("derivation.account_count must be >= 1")
        if self.logging.format not in ("human", "json"):
            raise ValueError(f"logging.format must be 'human' or 'json', got {self.logging.format!r}")


def _merge(dc: Any, raw: dict[str, Any]) -> None:
    """Copy known keys of *raw* onto dataclass *dc*; unknown keys are ignored."""
    for key, value in raw.items():
        key_under = key.replace("-", "_")
        if hasattr(dc, key_under):
            setattr(dc, key_under, value)


def load_config(path: str | None = None) -> StellarCryptoConfig:
    """
    Load configuration from a TOML file, then overlay environment variables.

    Env-var mapping:
        STELLAR_CRYPTO_LANGUAGE    -> mnemonic.language
        STELLAR_CRYPTO_WORD_COUNT  -> mnemonic.word_count
        STELLAR_CRYPTO_LOG_LEVEL   -> logging.level
        STELLAR_CRYPTO_LOG_FMT     -> logging.format

    A missing file is not an error; defaults apply.
    """
    cfg = StellarCryptoConfig()

    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p, "rb") as f:
                data = tomllib.load(f)
            for section_name, section_dc in [
                ("mnemonic", cfg.mnemonic),
                ("derivation", cfg.derivation),
                ("logging", cfg.logging),
            ]:
                if isinstance(data.get(section_name), dict):
                    _merge(section_dc, data[section_name])

    if v := os.environ.get("STELLAR_CRYPTO_LANGUAGE"):
        cfg.mnemonic.language = v.strip().lower()
    if v := os.environ.get("STELLAR_CRYPTO_WORD_COUNT"):
        cfg.mnemonic.word_count = int(v)
    if v := os.environ.get("STELLAR_CRYPTO_LOG_LEVEL"):
        cfg.logging.level = v.upper()
    if v := os.environ.get("STELLAR_CRYPTO_LOG_FMT"):
        cfg.logging.format = v

    return cfg
