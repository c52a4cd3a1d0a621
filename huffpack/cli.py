import argparse
import io
import json
import sys

import yaml

from .compression import Compressor
from .config_loader import configure_logging, load_config
from .container import describe
from .errors import (
    DegenerateInputError,
    EmptyInputError,
    FormatError,
    InputTooLargeError,
    SourceChangedError,
)

EXIT_OK = 0
EXIT_IO = 1
EXIT_EMPTY = 3
EXIT_FORMAT = 4
EXIT_DEGENERATE = 5
EXIT_TOO_LARGE = 6
EXIT_SOURCE_CHANGED = 7

# most specific first
EXIT_CODES = [
    (EmptyInputError, EXIT_EMPTY),
    (FormatError, EXIT_FORMAT),
    (DegenerateInputError, EXIT_DEGENERATE),
    (InputTooLargeError, EXIT_TOO_LARGE),
    (SourceChangedError, EXIT_SOURCE_CHANGED),
    (OSError, EXIT_IO),
]


def build_parser():
    parser = argparse.ArgumentParser(prog="huffpack", description="Static Huffman file compressor")
    parser.add_argument("--config", help="path of a YAML configuration file")
    parser.add_argument("-v", "--verbose", action="store_true", help="report sizes on stderr")
    commands = parser.add_subparsers(dest="command", required=True)

    for name, text in (("compress", "compress INPUT into the container OUTPUT"),
                       ("decompress", "restore OUTPUT from the container INPUT")):
        command = commands.add_parser(name, help=text)
        command.add_argument("input", help="input path, '-' for stdin")
        command.add_argument("output", help="output path, '-' for stdout")

    info = commands.add_parser("info", help="print the header summary of a container as JSON")
    info.add_argument("input", help="container path, '-' for stdin")
    return parser


def _run(args, compressor):
    if args.command == "info":
        if args.input == "-":
            return describe(sys.stdin.buffer), None
        with open(args.input, "rb") as source:
            return describe(source), None

    if args.input == "-" or args.output == "-":
        source = io.BytesIO(sys.stdin.buffer.read()) if args.input == "-" else open(args.input, "rb")
        with source:
            sink = io.BytesIO()
            if args.command == "compress":
                stats = compressor.compress_stream(source, sink)
            else:
                stats = compressor.decompress_stream(source, sink)
        if args.output == "-":
            sys.stdout.buffer.write(sink.getvalue())
            sys.stdout.buffer.flush()
        else:
            with open(args.output, "wb") as f:
                f.write(sink.getvalue())
        return None, stats

    if args.command == "compress":
        return None, compressor.compress_file(args.input, args.output)
    return None, compressor.decompress_file(args.input, args.output)


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"huffpack: bad configuration: {e}", file=sys.stderr)
        return EXIT_IO
    configure_logging(config)

    try:
        info, stats = _run(args, Compressor(config))
    except Exception as e:
        for error_type, code in EXIT_CODES:
            if isinstance(e, error_type):
                print(f"huffpack: {e}", file=sys.stderr)
                return code
        raise

    if info is not None:
        print(json.dumps(info.to_dict(), indent=2))
    elif args.verbose:
        print(
            f"{stats.original_size} bytes <-> {stats.compressed_size} bytes "
            f"({stats.distinct_symbols} symbols, ratio {stats.ratio:.2%})",
            file=sys.stderr,
        )
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
