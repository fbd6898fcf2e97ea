"""Main CLI entry point for schemabin."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional

from pydantic import ValidationError

from .. import __version__
from ..codec import decode, decode_schema, encode, encode_schema
from ..codec.schema import SchemaContainer
from ..config import CodecOptions
from ..exceptions import SchemabinError
from ..framing import extract, pack_bytes, read_header, strip, unpack_bytes, wrap
from ..values import parse_value, render_value
from .describe import describe_schema

logger = logging.getLogger(__name__)


def _read_input(path: Optional[Path]) -> bytes:
    if path is None:
        return sys.stdin.buffer.read()
    return path.read_bytes()


def _write_output(path: Optional[Path], data: bytes) -> None:
    if path is None:
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
    else:
        path.write_bytes(data)


def _load_schema(args: argparse.Namespace) -> Optional[SchemaContainer]:
    """Load the schema named by --schema (binary) or --schema-json (JSON), if any."""
    if getattr(args, "schema_json", None) is not None:
        return SchemaContainer.model_validate_json(args.schema_json.read_bytes())
    if getattr(args, "schema", None) is not None:
        # A schema file may also be a whole self-describing blob; only its header is used
        schema, _ = decode_schema(args.schema.read_bytes())
        return schema
    return None


def cmd_pack(args: argparse.Namespace) -> None:
    data = _read_input(args.input)
    _write_output(args.output, pack_bytes(data, include_schema=not args.no_schema))


def cmd_unpack(args: argparse.Namespace) -> None:
    data = _read_input(args.input)
    _write_output(args.output, unpack_bytes(data, has_schema=not args.no_schema))


def cmd_encode(args: argparse.Namespace) -> None:
    value = parse_value(_read_input(args.input))
    schema = _load_schema(args)
    if schema is None:
        logger.warning("No schema given: output is not reversible and cannot hold null")

    payload = encode(value, schema)
    if schema is not None and not args.no_header:
        payload = wrap(encode_schema(schema), payload)
    _write_output(args.output, payload)


def cmd_decode(args: argparse.Namespace) -> None:
    data = _read_input(args.input)
    schema = _load_schema(args)
    if schema is None:
        schema, data = read_header(data)

    options = CodecOptions(strict_trailing=not args.lenient)
    value = decode(data, schema, options)
    text = render_value(value, pretty=args.pretty) + "\n"
    _write_output(args.output, text.encode("utf-8"))


def cmd_extract(args: argparse.Namespace) -> None:
    _write_output(args.output, extract(_read_input(args.input)))


def cmd_strip(args: argparse.Namespace) -> None:
    _write_output(args.output, strip(_read_input(args.input)))


def cmd_schema(args: argparse.Namespace) -> None:
    schema = SchemaContainer.model_validate_json(_read_input(args.input))
    _write_output(args.output, encode_schema(schema))


def cmd_describe(args: argparse.Namespace) -> None:
    data = _read_input(args.input)
    if args.json:
        schema = SchemaContainer.model_validate_json(data)
    else:
        schema, _ = read_header(data)
    describe_schema(schema, sys.stdout)


COMMANDS: Dict[str, Callable[[argparse.Namespace], None]] = {
    "pack": cmd_pack,
    "unpack": cmd_unpack,
    "encode": cmd_encode,
    "decode": cmd_decode,
    "extract": cmd_extract,
    "strip": cmd_strip,
    "schema": cmd_schema,
    "describe": cmd_describe,
}


def _add_io(parser: argparse.ArgumentParser, output: bool = True) -> None:
    parser.add_argument(
        "-i", "--input", type=Path, metavar="FILE", help="Read input from FILE instead of stdin"
    )
    if output:
        parser.add_argument(
            "-o",
            "--output",
            type=Path,
            metavar="FILE",
            help="Write output to FILE instead of stdout",
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schemabin",
        description="schemabin: schema-driven binary codec for JSON values",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  schemabin schema -i point.schema.json -o point.schema      Compile a JSON schema
  schemabin encode -s point.schema -i point.json -o point.bin
  schemabin decode -i point.bin --pretty                     Decode a self-describing blob
  schemabin strip -i point.bin -o point.payload               Drop the schema header
        """,
    )
    parser.add_argument("--version", action="version", version=f"schemabin {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    pack = subparsers.add_parser("pack", help="Frame raw bytes as a length-prefixed blob")
    _add_io(pack)
    pack.add_argument("-n", "--no-schema", action="store_true", help="Omit the schema header")

    unpack = subparsers.add_parser("unpack", help="Recover raw bytes from a packed blob")
    _add_io(unpack)
    unpack.add_argument(
        "-n", "--no-schema", action="store_true", help="Input has no schema header"
    )

    encode_parser = subparsers.add_parser("encode", help="Convert JSON to binary")
    _add_io(encode_parser)
    schema_group = encode_parser.add_mutually_exclusive_group()
    schema_group.add_argument(
        "-s", "--schema", type=Path, metavar="FILE", help="Binary schema to follow"
    )
    schema_group.add_argument(
        "--schema-json", type=Path, metavar="FILE", help="JSON schema to follow"
    )
    encode_parser.add_argument(
        "--no-header", action="store_true", help="Do not prefix the output with the schema"
    )

    decode_parser = subparsers.add_parser(
        "decode", help="Convert binary to JSON (schema header required unless --schema)"
    )
    _add_io(decode_parser)
    schema_group = decode_parser.add_mutually_exclusive_group()
    schema_group.add_argument(
        "-s", "--schema", type=Path, metavar="FILE", help="Binary schema for a bare payload"
    )
    schema_group.add_argument(
        "--schema-json", type=Path, metavar="FILE", help="JSON schema for a bare payload"
    )
    decode_parser.add_argument(
        "--lenient", action="store_true", help="Ignore bytes after the decoded value"
    )
    decode_parser.add_argument("--pretty", action="store_true", help="Indent the JSON output")

    extract_parser = subparsers.add_parser("extract", help="Output only the schema header")
    _add_io(extract_parser)

    strip_parser = subparsers.add_parser("strip", help="Remove the schema header")
    _add_io(strip_parser)

    schema_parser = subparsers.add_parser("schema", help="Compile a JSON schema to binary")
    _add_io(schema_parser)

    describe_parser = subparsers.add_parser(
        "describe", help="Show the declarations of a schema or blob header"
    )
    _add_io(describe_parser, output=False)
    describe_parser.add_argument(
        "--json", action="store_true", help="Input is a JSON schema rather than binary"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the schemabin CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    # If no command specified, show help
    if args.command is None:
        parser.print_help()
        return 0

    try:
        COMMANDS[args.command](args)
        return 0
    except SchemabinError as e:
        print(f"Error: {type(e).__name__}: {e}", file=sys.stderr)
        return 1
    except ValidationError as e:
        print(f"Error: invalid JSON schema: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: invalid JSON input: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
