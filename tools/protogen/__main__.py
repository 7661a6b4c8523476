"""
CLI entry point for protogen.

Usage:
    python3 -m tools.protogen --binapi-dir ../govpp/binapi --output proto/
    python3 -m tools.protogen --config config/proto.yaml --converters
    python3 -m tools.protogen --proto=false --converters
"""

import argparse
import os
import sys
from dataclasses import dataclass
from typing import List, Optional

from .config import ValidationError, default_config, load_config
from .converter_emitter import DEFAULT_BINAPI_IMPORT, write_converters
from .proto_emitter import DEFAULT_GO_PACKAGE, DEFAULT_PROTO_PACKAGE, write_proto
from .scanner import scan_binapi

DEFAULT_CONVERTERS_OUTPUT = os.path.join(
    "..", "esba-tnc-agent", "agent", "grpc", "handler", "converters_gen.go")


@dataclass(frozen=True)
class GeneratorOptions:
    """Everything one run needs, resolved from the command line."""
    binapi_dir: str
    output_dir: str = "proto"
    config_file: str = os.path.join("config", "proto.yaml")
    generate_proto: bool = True
    generate_converters: bool = False
    converters_output: str = DEFAULT_CONVERTERS_OUTPUT
    proto_package: str = DEFAULT_PROTO_PACKAGE
    go_package: str = DEFAULT_GO_PACKAGE
    binapi_import: str = DEFAULT_BINAPI_IMPORT


def str2bool(value: str) -> bool:
    """Parse a boolean flag value the way Go's flag package accepts them."""
    lowered = value.lower()
    if lowered in ("1", "t", "true", "yes", "on"):
        return True
    if lowered in ("0", "f", "false", "no", "off"):
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value: {value!r}")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate proto messages from VPP binapi bindings"
    )
    parser.add_argument("--binapi-dir", default="",
                        help="binapi source tree (default: ../govpp/binapi)")
    parser.add_argument("--output", default="proto", help="Output directory")
    parser.add_argument("--config", default=os.path.join("config", "proto.yaml"),
                        help="Resource configuration file")
    parser.add_argument("--proto", type=str2bool, nargs="?", const=True, default=True,
                        metavar="BOOL", help="Generate the .proto file (default: true)")
    parser.add_argument("--converters", type=str2bool, nargs="?", const=True,
                        default=False, metavar="BOOL",
                        help="Generate Go converter functions (default: false)")
    parser.add_argument("--converters-output", default=DEFAULT_CONVERTERS_OUTPUT,
                        help="Go converters file path")
    parser.add_argument("--proto-package", default=DEFAULT_PROTO_PACKAGE,
                        help="proto package name")
    parser.add_argument("--go-package", default=DEFAULT_GO_PACKAGE,
                        help="go_package option and converter import path")
    parser.add_argument("--binapi-import", default=DEFAULT_BINAPI_IMPORT,
                        help="Go import path of the binapi root")
    return parser


def parse_options(argv: Optional[List[str]] = None) -> GeneratorOptions:
    args = build_arg_parser().parse_args(argv)

    binapi_dir = args.binapi_dir
    if not binapi_dir:
        binapi_dir = os.path.join(os.getcwd(), "..", "govpp", "binapi")

    return GeneratorOptions(
        binapi_dir=binapi_dir,
        output_dir=args.output,
        config_file=args.config,
        generate_proto=args.proto,
        generate_converters=args.converters,
        converters_output=args.converters_output,
        proto_package=args.proto_package,
        go_package=args.go_package,
        binapi_import=args.binapi_import,
    )


def run(options: GeneratorOptions):
    """
    Execute one generation pass.

    Raises FileNotFoundError if the binapi path is missing,
    ValidationError for a malformed configuration file and OSError when
    the source tree cannot be walked or output cannot be written.
    """
    if not os.path.exists(options.binapi_dir):
        raise FileNotFoundError(f"binapi path not found: {options.binapi_dir}")

    try:
        config = load_config(options.config_file)
    except FileNotFoundError:
        print(f"Config file {options.config_file} not found, using built-in defaults")
        config = default_config()

    print(f"Scanning binapi: {options.binapi_dir}")
    types = scan_binapi(options.binapi_dir, config)
    print(f"  found {len(types)} message type(s)")

    if options.generate_proto:
        path = write_proto(types, config, options.output_dir,
                           options.proto_package, options.go_package)
        print(f"  wrote {path}")

    if options.generate_converters:
        path = write_converters(types, config, options.converters_output,
                                options.go_package, options.binapi_import)
        print(f"  wrote {path}")

    print("\nDone.")


def main(argv: Optional[List[str]] = None):
    options = parse_options(argv)
    try:
        run(options)
    except ValidationError as e:
        print(f"Error: invalid config {options.config_file}: {e}", file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
