"""
Shared pytest fixtures for the stellar-crypto test suite.
"""

import pytest

from stellar_crypto.bip39 import Mnemonic
from stellar_crypto.keypair import KeyPair

# SEP-0005 test vector 1
SEP5_PHRASE = "illness spike retreat truth genius clock brain pass fit cave bargain toe"
# SEP-0053 signing key
SEP53_SEED = "SAKICEVQLYWGSOJS4WW7HZJWAHZVEEBS527LHK5V4MLJALYKICQCJXMW"
SEP53_ACCOUNT = "GBXFXNDLV4LSWA4VB7YIL5GBD7BVNR22SGBTDKMO2SBZZHDXSKZYCP7L"


@pytest.fixture
def sep5_mnemonic():
    """Mnemonic of SEP-0005 test vector 1."""
    return Mnemonic.from_words(SEP5_PHRASE)


@pytest.fixture
def signer():
    """Deterministic signing key pair."""
    return KeyPair.from_secret_seed(SEP53_SEED)


@pytest.fixture
def verifier():
    """Public-only key pair for the same account as ``signer``."""
    return KeyPair.from_account_id(SEP53_ACCOUNT)


@pytest.fixture
def random_keypair():
    """Fresh random key pair."""
    return KeyPair.random()


@pytest.fixture
def toml_config(tmp_path):
    """Write a TOML document to a temp file and return its path."""
    def _write(content: str) -> str:
        path = tmp_path / "stellar-crypto.toml"
        path.write_text(content, encoding="utf-8")
        return str(path)
    return _write
