"""
Dump protobuf files without a schema.

Usage:
    protopeek message.bin                   # indented field tree
    protopeek a.bin b.bin                   # several files, one header each
    protopeek --json message.bin            # nested JSON instead of text
    protopeek --groups nest message.bin     # indent fields inside groups

Every file is decoded on its own. A file that can't be read or parsed is
reported on stderr and the remaining files are still dumped, unless
--fail-fast is given. The exit status is 1 if anything failed.
"""

import argparse
import json
import logging
import sys

from protopeek import config
from protopeek.errors import DecodeError
from protopeek.message import decode
from protopeek.render import render, render_tree


def build_arg_parser():
    parser = argparse.ArgumentParser(prog="protopeek", description="Decode protobuf wire-format files without a .proto schema")
    parser.add_argument("files", nargs="+", help="Binary protobuf files to decode")
    parser.add_argument("--groups", choices=config.GROUP_MODES, default=None,
                        help=f"How to show group markers (default: {config.GROUP_MODE})")
    parser.add_argument("--json", action="store_true", help="Print the decoded tree as JSON")
    parser.add_argument("--fail-fast", action="store_true", help="Stop at the first file that fails")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def dump_file(path, groups=None, as_json=False, out=None):
    """Decode one file and write it to out. Raises OSError or DecodeError."""
    out = out or sys.stdout
    with open(path, "rb") as f:
        data = f.read()

    logging.info(f"Decoding {path} ({len(data)} bytes)")
    message = decode(data)

    if as_json:
        print(json.dumps(render_tree(message, groups), indent=2, ensure_ascii=False), file=out)
    else:
        for line in render(message, groups):
            print(line, file=out)


def main(argv=None):
    args = build_arg_parser().parse_args(argv)
    try:
        config.validate()
    except config.ConfigError as e:
        print(f"Error: bad configuration: {e}", file=sys.stderr)
        return 1
    config.setup_logging("DEBUG" if args.verbose else None)

    failed = 0
    for path in args.files:
        if len(args.files) > 1:
            print(f"==> {path} <==")
        try:
            dump_file(path, args.groups, args.json)
        except OSError as e:
            print(f"Error: cannot read '{path}': {e.strerror or e}", file=sys.stderr)
            failed += 1
        except DecodeError as e:
            cause = f" ({e.__cause__})" if e.__cause__ else ""
            print(f"Error: parse error in '{path}': {e}{cause}", file=sys.stderr)
            logging.debug(f"Decode of {path} failed at offset {e.offset}", exc_info=True)
            failed += 1
        else:
            continue

        if args.fail_fast:
            break

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
