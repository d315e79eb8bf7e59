#!/usr/bin/env python3
"""
flitevox Command Line Interface
===============================

Usage:
    flitevox info <file> [--legacy-fields] [--strict]

License: MIT
"""

import argparse
import logging
import sys

from . import __version__
from .decoder import DecoderOptions
from .voice import read_voice_file, voice_info


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='flitevox',
        description='flitevox: CST voice file decoder'
    )
    parser.add_argument('--version', action='version',
                        version=f'flitevox {__version__}')
    parser.add_argument('--debug', action='store_true',
                        help='Show full stack trace on error')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log decode progress to stderr')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Info command
    info_parser = subparsers.add_parser('info', help='Show voice file information')
    info_parser.add_argument('file', help='.flitevox file to inspect')
    info_parser.add_argument('--legacy-fields', action='store_true',
                             help='Do not verify feature names (older voices)')
    info_parser.add_argument('--strict', action='store_true',
                             help='Fail if bytes remain after the decoded sections')

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s'
    )

    try:
        if args.command == 'info':
            cmd_info(args)
    except Exception as e:
        if args.debug:
            raise  # Show full stack trace for debugging
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def cmd_info(args):
    """Show voice file information"""
    options = DecoderOptions(
        verify_field_names=not args.legacy_fields,
        strict_trailing_bytes=args.strict,
    )
    voice = read_voice_file(args.file, options)
    info = voice_info(voice)

    print(f"Voice File: {args.file}")
    print("-" * 50)
    for key, value in info.items():
        if key == 'f0_tree_sizes':
            print(f"  {key}:")
            for i, size in enumerate(value):
                print(f"    [{i}]: {size} trees")
        elif isinstance(value, float):
            print(f"  {key}: {value:.4f}")
        else:
            print(f"  {key}: {value}")


if __name__ == '__main__':
    main()
