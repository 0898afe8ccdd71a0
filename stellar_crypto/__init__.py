"""
stellar_crypto - Stellar key material and address encoding.

Key features:
- StrKey (SEP-0023) encoding for accounts, seeds, muxed accounts, signed
  payloads, contracts, liquidity pools and claimable balances
- Ed25519 key pairs with decorated and SEP-0053 message signatures
- BIP-39 mnemonics over the standard multi-language word lists
- SEP-0005 hierarchical derivation at m/44'/148'/N'
"""

__version__ = "1.0.0"
__all__ = [
    "checksum",
    "version_bytes",
    "strkey",
    "muxed_account",
    "keypair",
    "wordlist",
    "bip39",
    "hd_node",
    "errors",
    "config",
    "logging_config",
    "cli",
]
