"""Command line entry point for decrypting, encrypting and editing save files."""

import argparse
import os
import sys
from typing import Any, List, Optional

from save_codec import (
    DecryptionError,
    EditSession,
    Layering,
    NotEditableError,
    ParseError,
    SaveCodecError,
    decode,
    encode,
    get_parse_error,
    parse_json,
)

from .config import config
from .logger import log, setup_logging
from .validation import (
    ValidationError,
    output_file_name,
    validate_decrypt_request,
    validate_editor_request,
    validate_encrypt_request,
)

GZIP_WARNING = (
    "Your save file was also GUnZipped (decompressed). When you re-encrypt it, "
    "pass --gzip so it is re-compressed, otherwise the game might not recognize "
    "the save file and might delete it."
)


def _read(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def _write(path: str, data: bytes) -> None:
    with open(path, "wb") as f:
        f.write(data)
    log.info(f"Wrote {len(data)} bytes to {path}")


def _default_output(input_path: str, encrypting: bool) -> str:
    return os.path.join(os.path.dirname(input_path), output_file_name(input_path, encrypting))


def _password(args: argparse.Namespace) -> Optional[str]:
    if args.password is not None:
        return args.password or None
    return config.default_password


def cmd_decrypt(args: argparse.Namespace) -> int:
    data = _read(args.input)
    password = _password(args)
    validate_decrypt_request(data, password)

    result = decode(data, password)
    _write(args.output or _default_output(args.input, encrypting=False), result.plaintext)

    if result.layering.was_compressed:
        print(GZIP_WARNING, file=sys.stderr)
    return 0


def cmd_encrypt(args: argparse.Namespace) -> int:
    data = _read(args.input)
    password = _password(args)
    validate_encrypt_request(data, password, args.gzip)

    layering = Layering(was_compressed=args.gzip, was_encrypted=bool(password))
    encoded = encode(data, password, layering, compress_level=config.compress_level)
    _write(args.output or _default_output(args.input, encrypting=True), encoded)
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    data = _read(args.input)
    password = _password(args)

    result = decode(data, password)
    print(f"encrypted: {'yes' if result.layering.was_encrypted else 'no'}")
    print(f"compressed: {'yes' if result.layering.was_compressed else 'no'}")
    print(f"size: {len(result.plaintext)} bytes")

    try:
        parse_json(result.plaintext)
    except ParseError as e:
        print(f"editable: no ({e})")
        return 1

    strict_error = get_parse_error(result.plaintext)
    if strict_error is not None:
        print(f"editable: yes (trailing commas repaired: {strict_error})")
    else:
        print("editable: yes")
    return 0


def _parse_assignment(assignment: str) -> tuple:
    path, sep, raw_value = assignment.partition("=")
    if not sep or not path:
        raise ValidationError(f"Invalid assignment {assignment!r}, expected PATH=JSON")
    try:
        value = parse_json(raw_value, allow_comma_repair=False)
    except ParseError as e:
        raise ValidationError(
            f"Invalid value in {assignment!r}: {e}; quote strings, e.g. name=\"hero\""
        ) from None
    return path.split("."), value


def set_path(document: Any, keys: List[str], value: Any) -> None:
    """Assign a value inside a document by a list of keys or list indices."""
    target = document
    for i, key in enumerate(keys):
        last = i == len(keys) - 1
        if isinstance(target, list):
            try:
                index = int(key)
                if last:
                    target[index] = value
                else:
                    target = target[index]
            except (ValueError, IndexError):
                raise ValidationError(f"Invalid list index {key!r} in {'.'.join(keys)}") from None
        elif isinstance(target, dict):
            if last:
                target[key] = value
            elif key not in target:
                raise ValidationError(f"Key {key!r} not found in {'.'.join(keys)}")
            else:
                target = target[key]
        else:
            raise ValidationError(f"Cannot descend into {type(target).__name__} at {key!r}")


def cmd_edit(args: argparse.Namespace) -> int:
    data = _read(args.input)
    password = _password(args)
    validate_editor_request(data, password)

    session = EditSession.open(data, password, compress_level=config.compress_level)
    try:
        document = session.document
        for assignment in args.set or []:
            keys, value = _parse_assignment(assignment)
            set_path(document, keys, value)
        if args.set:
            session.update_document(document)
        if args.gzip is not None:
            session.set_compression(args.gzip)
        _write(args.output, session.save())
    finally:
        session.close()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="save-codec",
        description="Decrypt, encrypt and edit password protected game save files.",
    )
    parser.add_argument("--log-level", help="Override SAVE_CODEC_LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_common(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("input", help="Save file to read")
        sub.add_argument("-p", "--password", help="Save file password (empty for none)")

    decrypt_parser = subparsers.add_parser("decrypt", help="Decrypt and gunzip a save file")
    add_common(decrypt_parser)
    decrypt_parser.add_argument("-o", "--output", help="Output file")
    decrypt_parser.set_defaults(func=cmd_decrypt)

    encrypt_parser = subparsers.add_parser("encrypt", help="Gzip and encrypt a save file")
    add_common(encrypt_parser)
    encrypt_parser.add_argument("-o", "--output", help="Output file")
    encrypt_parser.add_argument(
        "--gzip", action="store_true",
        help="Gzip before encrypting; only if decrypting warned that the file was gunzipped",
    )
    encrypt_parser.set_defaults(func=cmd_encrypt)

    check_parser = subparsers.add_parser("check", help="Show the layering of a save file")
    add_common(check_parser)
    check_parser.set_defaults(func=cmd_check)

    edit_parser = subparsers.add_parser("edit", help="Edit values and re-encode with the same layering")
    add_common(edit_parser)
    edit_parser.add_argument("-o", "--output", required=True, help="Output file")
    edit_parser.add_argument(
        "--set", action="append", metavar="PATH=JSON",
        help="Assign a JSON value, e.g. --set player.hp=100; strings need JSON quotes (repeatable)",
    )
    gzip_group = edit_parser.add_mutually_exclusive_group()
    gzip_group.add_argument("--gzip", dest="gzip", action="store_true", default=None,
                            help="Force gzip on save")
    gzip_group.add_argument("--no-gzip", dest="gzip", action="store_false",
                            help="Force no gzip on save")
    edit_parser.set_defaults(func=cmd_edit, gzip=None)

    return parser


def run(argv: Optional[List[str]] = None) -> int:
    """Run the command line tool and return the exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.log_level:
        setup_logging(log_level=args.log_level)

    try:
        return args.func(args)
    except ValidationError as e:
        log.error(f"Validation error in {args.command}: {e}")
        print(f"Failed {args.command}: {e}", file=sys.stderr)
    except NotEditableError as e:
        log.error(f"{e.classification}: {e.parse_error}")
        print(f"{e.classification}: {e}", file=sys.stderr)
    except DecryptionError as e:
        log.error(f"{e.classification}: {e}")
        print(
            f"{e.classification}: wrong decryption password? "
            "Try leaving the password field empty.",
            file=sys.stderr,
        )
    except SaveCodecError as e:
        log.error(f"{e.classification}: {e}")
        print(f"{e.classification}: {e}", file=sys.stderr)
    except OSError as e:
        log.error(f"File error in {args.command}: {e}")
        print(f"Failed processing the save file: {e}", file=sys.stderr)
    return 1


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
