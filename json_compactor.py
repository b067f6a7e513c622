#!/usr/bin/env python3
"""
JSON Compactor
==============

Reads JSON text from stdin, drops whitespace outside quoted strings and
writes the result to stdout. The input is never parsed or validated.

Usage:
    cat file.json | jc > compact.json
"""

import argparse
import logging
import os
import sys
from typing import BinaryIO, List, Optional

from base_classes import TerminationCause
from compaction import __version__
from compaction.workers.cancellation import CancellationFlag
from compaction.workers.pump import StreamPump
from compaction.workers.shutdown import ShutdownSequencer
from compactor_configs import CompactorConfig, DEFAULT_CHUNK_SIZE
from stream_monitoring import StreamMonitor

logger = logging.getLogger(__name__)

PROG = 'jc'
DESCRIPTION = ("jc is a simple tool for compressing JSON.  jc does no input validation.  "
               "jc reads from stdin and writes to stdout.")


class UsageError(Exception):
    """Command line could not be parsed"""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser; unset flags stay None so the environment can fill them"""
    parser = _ArgumentParser(
        prog=PROG,
        usage=f'{PROG} [flags]',
        description=DESCRIPTION
    )
    parser.add_argument('-v', '--version', action='store_const', const=True, default=None,
                        help='show version')
    parser.add_argument('--chunk-size', type=int, default=None, metavar='BYTES',
                        help=f'read buffer size (default {DEFAULT_CHUNK_SIZE})')
    parser.add_argument('--log-level', default=None, metavar='LEVEL',
                        help='diagnostic log level (default WARNING)')
    parser.add_argument('extra', nargs='*', help=argparse.SUPPRESS)
    return parser


def compact_stream(source: BinaryIO, sink: BinaryIO, config: CompactorConfig) -> TerminationCause:
    """
    Compact `source` into `sink` with graceful shutdown on signals.

    Args:
        source: Binary input stream
        sink: Binary output stream, flushed at the end unless its reader is gone
        config: Compactor settings

    Returns:
        Why the stream stopped
    """
    cancellation = CancellationFlag()
    monitor = StreamMonitor()
    monitor.start()
    pump = StreamPump(source, sink, cancellation,
                      chunk_size=config.chunk_size,
                      monitor=monitor)
    sequencer = ShutdownSequencer(pump, sink, cancellation,
                                  install_handlers=config.handle_signals)
    cause = sequencer.run()

    metrics = monitor.stop()
    logger.info(f"Compaction complete: {metrics.bytes_in} -> {metrics.bytes_out} bytes "
                f"({metrics.reduction_percent:.1f}% reduction) in {metrics.chunks_processed} chunks, "
                f"stopped on {cause.value}")
    logger.debug(f"Stream summary: {monitor.get_summary()}")
    return cause


def _discard_stdout() -> None:
    """Point stdout at devnull so interpreter shutdown does not flush into a closed pipe"""
    try:
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        os.close(devnull)
    except (OSError, ValueError) as e:
        logger.debug(f"Could not redirect stdout: {e}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        config = CompactorConfig.from_sources({
            'version': args.version,
            'chunk-size': args.chunk_size,
            'log-level': args.log_level,
        })
    except (UsageError, ValueError) as e:
        print(f"{PROG}: {e}", file=sys.stderr)
        print(f"Try {PROG} --help for more information.", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=config.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr
    )

    if args.extra:
        parser.print_usage(sys.stderr)
        return 0

    if config.show_version:
        print(__version__)
        return 0

    cause = compact_stream(sys.stdin.buffer, sys.stdout.buffer, config)
    if cause is TerminationCause.DOWNSTREAM_BROKEN_PIPE:
        _discard_stdout()
    return 0


if __name__ == "__main__":
    sys.exit(main())
