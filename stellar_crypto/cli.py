"""
Command-line front end: ``stellar-crypto``.

Usage:
    stellar-crypto generate --words 24 --count 3
    stellar-crypto derive "illness spike retreat ..." --index 0
    stellar-crypto random
    stellar-crypto decode account GB...
    stellar-crypto encode contract 363eaa...
    stellar-crypto validate seed SB...
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Callable, NamedTuple, Optional, Sequence

from stellar_crypto import __version__, strkey
from stellar_crypto.bip39 import Mnemonic
from stellar_crypto.config import StellarCryptoConfig, load_config
from stellar_crypto.errors import InvalidEncoding, InvalidLength, NonHardenedIndex, StellarCryptoError
from stellar_crypto.hd_node import HDNode
from stellar_crypto.keypair import KeyPair
from stellar_crypto.logging_config import setup_logging

log = logging.getLogger("stellar_crypto.cli")


class _Kind(NamedTuple):
    encode: Callable[[bytes], str]
    decode: Callable[[str], bytes]
    is_valid: Callable[[str], bool]


def _encode_signed_payload(raw: bytes) -> str:
    return strkey.encode_signed_payload(strkey.SignedPayload.from_bytes(raw))


def _decode_signed_payload(encoded: str) -> bytes:
    return strkey.decode_signed_payload(encoded).to_bytes()


KINDS: dict[str, _Kind] = {
    "account": _Kind(strkey.encode_account_id, strkey.decode_account_id, strkey.is_valid_account_id),
    "seed": _Kind(strkey.encode_seed, strkey.decode_seed, strkey.is_valid_seed),
    "pre-auth-tx": _Kind(strkey.encode_pre_auth_tx, strkey.decode_pre_auth_tx, strkey.is_valid_pre_auth_tx),
    "sha256-hash": _Kind(strkey.encode_sha256_hash, strkey.decode_sha256_hash, strkey.is_valid_sha256_hash),
    "muxed": _Kind(
        strkey.encode_muxed_account_id, strkey.decode_muxed_account_id, strkey.is_valid_muxed_account_id,
    ),
    "signed-payload": _Kind(_encode_signed_payload, _decode_signed_payload, strkey.is_valid_signed_payload),
    "contract": _Kind(strkey.encode_contract_id, strkey.decode_contract_id, strkey.is_valid_contract_id),
    "liquidity-pool": _Kind(
        strkey.encode_liquidity_pool_id, strkey.decode_liquidity_pool_id, strkey.is_valid_liquidity_pool_id,
    ),
    "claimable-balance": _Kind(
        strkey.encode_claimable_balance_id,
        strkey.decode_claimable_balance_id,
        strkey.is_valid_claimable_balance_id,
    ),
}


# ===================================================================
#  Argument parsing
# ===================================================================

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="stellar-crypto", description="Stellar key and strkey tool")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--config", default=None, help="Path to a stellar-crypto TOML config file")
    p.add_argument("--log-level", default=None, help="Override logging level (DEBUG, INFO, ...)")
    p.add_argument("--json", action="store_true", help="Print results as JSON")
    sub = p.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Create a new mnemonic and derive accounts")
    gen.add_argument("--words", type=int, default=None, help="Word count (12/15/18/21/24)")
    _add_derivation_args(gen)

    der = sub.add_parser("derive", help="Derive accounts from an existing mnemonic")
    der.add_argument("phrase", nargs="+", help="Mnemonic words")
    der.add_argument("--no-checksum", action="store_true", help="Skip mnemonic checksum verification")
    _add_derivation_args(der)

    sub.add_parser("random", help="Create a random key pair")

    for name, help_text, value_help in [
        ("decode", "Decode a strkey to hex", "Strkey string"),
        ("encode", "Encode hex bytes as a strkey", "Hex payload"),
        ("validate", "Check whether a strkey is valid", "Strkey string"),
    ]:
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("kind", choices=sorted(KINDS), help="Identifier kind")
        cmd.add_argument("value", help=value_help)

    return p


def _add_derivation_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--language", default=None, help="Word list language")
    p.add_argument("--passphrase", default="", help="Optional BIP-39 passphrase")
    p.add_argument("--index", type=int, default=None, help="First account index")
    p.add_argument("--count", type=int, default=None, help="Number of accounts")


# ===================================================================
#  Commands
# ===================================================================

def _accounts(mnemonic: Mnemonic, passphrase: str, start: int, count: int) -> list[dict[str, Any]]:
    master = HDNode.master_node(mnemonic.to_seed(passphrase))
    rows = []
    for index in range(start, start + count):
        kp = master.derive_account(index)
        rows.append({"index": index, "account_id": kp.account_id, "secret_seed": kp.secret_seed})
    return rows


def _derivation_window(args: argparse.Namespace, cfg: StellarCryptoConfig) -> tuple[int, int]:
    start = args.index if args.index is not None else cfg.derivation.account_index
    count = args.count if args.count is not None else cfg.derivation.account_count
    if start < 0:
        raise NonHardenedIndex(f"--index must be >= 0, got {start}")
    if count < 1:
        raise InvalidLength(f"--count must be >= 1, got {count}")
    return start, count


def cmd_generate(args: argparse.Namespace, cfg: StellarCryptoConfig) -> dict[str, Any]:
    word_count = args.words or cfg.mnemonic.word_count
    language = args.language or cfg.mnemonic.language
    mnemonic = Mnemonic.generate(word_count, language)
    start, count = _derivation_window(args, cfg)
    log.info("Generated %d-word mnemonic, deriving %d account(s)", word_count, count)
    return {
        "mnemonic": mnemonic.phrase,
        "language": language,
        "accounts": _accounts(mnemonic, args.passphrase, start, count),
    }


def cmd_derive(args: argparse.Namespace, cfg: StellarCryptoConfig) -> dict[str, Any]:
    language = args.language or cfg.mnemonic.language
    verify = cfg.mnemonic.verify_checksum and not args.no_checksum
    mnemonic = Mnemonic.from_words(" ".join(args.phrase), language, verify_checksum=verify)
    start, count = _derivation_window(args, cfg)
    return {"accounts": _accounts(mnemonic, args.passphrase, start, count)}


def cmd_random(args: argparse.Namespace, cfg: StellarCryptoConfig) -> dict[str, Any]:
    kp = KeyPair.random()
    return {"account_id": kp.account_id, "secret_seed": kp.secret_seed}


def cmd_decode(args: argparse.Namespace, cfg: StellarCryptoConfig) -> dict[str, Any]:
    raw = KINDS[args.kind].decode(args.value)
    return {"kind": args.kind, "hex": raw.hex()}


def cmd_encode(args: argparse.Namespace, cfg: StellarCryptoConfig) -> dict[str, Any]:
    try:
        raw = bytes.fromhex(args.value)
    except ValueError:
        raise InvalidEncoding(f"Not a hex string: {args.value!r}") from None
    return {"kind": args.kind, "strkey": KINDS[args.kind].encode(raw)}


def cmd_validate(args: argparse.Namespace, cfg: StellarCryptoConfig) -> dict[str, Any]:
    return {"kind": args.kind, "valid": KINDS[args.kind].is_valid(args.value)}


COMMANDS: dict[str, Callable[[argparse.Namespace, StellarCryptoConfig], dict[str, Any]]] = {
    "generate": cmd_generate,
    "derive": cmd_derive,
    "random": cmd_random,
    "decode": cmd_decode,
    "encode": cmd_encode,
    "validate": cmd_validate,
}


def _print_text(result: dict[str, Any]) -> None:
    for key, value in result.items():
        if key == "accounts":
            for row in value:
                print(f"  [{row['index']}] {row['account_id']}  {row['secret_seed']}")
        else:
            print(f"{key}: {value}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        cfg = load_config(args.config)
        if args.log_level:
            cfg.logging.level = args.log_level.upper()
        cfg.validate()
    except ValueError as exc:
        print(f"config error: {exc}", file=sys.stderr)
        return 1
    setup_logging(level=cfg.logging.level, fmt=cfg.logging.format, log_file=cfg.logging.file)

    try:
        result = COMMANDS[args.command](args, cfg)
    except StellarCryptoError as exc:
        log.debug("%s failed: %s", args.command, type(exc).__name__)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(result, indent=2))
    else:
        _print_text(result)

    if args.command == "validate" and not result["valid"]:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
