"""Command-line access to a locker store.

    locker --namespace myApp put theme '"dark"'
    locker --namespace myApp get theme
    locker --namespace myApp --crypto-key s3cret put token abc --encrypted
    locker --namespace myApp list

Values given to `put` are parsed as JSON when possible and stored as plain
strings otherwise. Output is JSON on stdout.
"""
from __future__ import annotations
import argparse
import json
import sys
from typing import Iterable, Optional

from cryptography.fernet import InvalidToken

from locker_lib.config.config import LockerConfig, load_config
from locker_lib.exceptions import LockerError
from locker_lib.locker import Locker
from locker_lib.logging_config import configure_logging
from locker_lib.provider import LockerProvider


def get_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="locker", description="Inspect and edit a locker store")
    p.add_argument("--config", help="Path to a locker YAML config")
    p.add_argument("--driver", help="Driver id (default from config)")
    p.add_argument("--namespace", help="Namespace (default from config)")
    p.add_argument("--data-dir", help="Directory of the local driver")
    p.add_argument("--crypto-key", help="Passphrase for encrypted entries")
    p.add_argument("--log-level", help="Logging level, e.g. DEBUG")

    sub = p.add_subparsers(dest="command", required=True)
    g = sub.add_parser("get", help="Print the value stored under KEY")
    g.add_argument("key")
    g.add_argument("--encrypted", action="store_true")

    s = sub.add_parser("put", help="Store VALUE under KEY")
    s.add_argument("key")
    s.add_argument("value")
    s.add_argument("--encrypted", action="store_true")

    f = sub.add_parser("forget", help="Remove one or more keys")
    f.add_argument("keys", nargs="+")

    sub.add_parser("list", help="Print every item in the namespace")
    sub.add_parser("count", help="Print the number of items in the namespace")
    sub.add_parser("clean", help="Remove every item in the namespace")
    sub.add_parser("empty", help="Clear the whole driver, all namespaces")
    return p


def parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    if argv is not None:
        argv = list(argv)
    return get_parser().parse_args(argv)


def _parse_value(text: str):
    try:
        return json.loads(text)
    except ValueError:
        return text


def build_locker(args: argparse.Namespace) -> Locker:
    config: LockerConfig = load_config(args.config)
    if args.data_dir:
        config.data_dir = args.data_dir
    provider = LockerProvider(config)
    if args.driver:
        provider.set_default_driver(args.driver)
    if args.namespace is not None:
        provider.set_default_namespace(args.namespace)
    locker = provider.get()
    if args.crypto_key:
        locker.set_crypto_key(args.crypto_key)
    return locker


def run(args: argparse.Namespace) -> object:
    locker = build_locker(args)
    cmd = args.command
    if cmd == "get":
        return locker.get(args.key, None, args.encrypted)
    if cmd == "put":
        return locker.put(args.key, _parse_value(args.value), args.encrypted)
    if cmd == "forget":
        locker.forget(args.keys)
        return True
    if cmd == "list":
        return locker.all()
    if cmd == "count":
        return locker.count()
    if cmd == "clean":
        locker.clean()
        return True
    if cmd == "empty":
        locker.empty()
        return True
    raise ValueError(f"unknown command {cmd!r}")


def main(argv: Optional[Iterable[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.config, args.log_level)
    try:
        result = run(args)
    except LockerError as e:
        print(f"locker: {e}", file=sys.stderr)
        return 1
    except InvalidToken:
        print("locker: could not decrypt the value, check --crypto-key", file=sys.stderr)
        return 1
    print(json.dumps(result, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
