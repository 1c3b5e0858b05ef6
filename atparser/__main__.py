import argparse
import asyncio
import logging
import sys
from typing import Callable, List, Optional

from atparser.buffer import DEFAULT_BUFFER_SIZE
from atparser.demo import DemoCommands
from atparser.line_reader import DEFAULT_MAX_LINE_LENGTH
from atparser.processor import DEFAULT_MAX_PAYLOAD, ATCommandProcessor
from atparser.server import serve_stdio, start_tcp_server


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='atparser',
        description='Serve the demo AT command set over stdio or TCP.',
        epilog='Example usage: python -m atparser -c 2323'
    )
    parser.add_argument(
        '-c', '--tcp-port',
        type=int,
        default=None,
        help='Port to listen for TCP clients (e.g., 2323). If omitted, stdin/stdout is used.'
    )
    parser.add_argument(
        '--host',
        default='0.0.0.0',
        help='Address to bind the TCP server to (default: 0.0.0.0).'
    )
    parser.add_argument(
        '--buffer-size',
        type=int,
        default=DEFAULT_BUFFER_SIZE,
        help=f'Bytes available for a command name and its parameters (default: {DEFAULT_BUFFER_SIZE}).'
    )
    parser.add_argument(
        '--max-payload',
        type=int,
        default=DEFAULT_MAX_PAYLOAD,
        help='Split responses into chunks of at most this many bytes (default: 0, no splitting).'
    )
    parser.add_argument(
        '--max-line-length',
        type=int,
        default=DEFAULT_MAX_LINE_LENGTH,
        help=f'Longest accepted command line (default: {DEFAULT_MAX_LINE_LENGTH}).'
    )
    parser.add_argument(
        '--no-prefix',
        action='store_true',
        help='Accept command names without a "&" or "+" prefix.'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Log every parsed command.'
    )
    return parser


def make_processor_factory(args: argparse.Namespace) -> Callable[[Callable[[bytes], None]], ATCommandProcessor]:
    def factory(client_output_cb: Callable[[bytes], None]) -> ATCommandProcessor:
        processor = ATCommandProcessor(
            client_output_cb,
            buffer_size=args.buffer_size,
            prefix_required=not args.no_prefix,
            max_payload=args.max_payload,
            max_line_length=args.max_line_length,
        )
        processor.set_at_callbacks(DemoCommands(processor.print_at_response))
        return processor
    return factory


async def main(argv: Optional[List[str]] = None) -> None:
    args = build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(message)s',
        stream=sys.stderr
    )

    factory = make_processor_factory(args)
    if args.tcp_port is None:
        await serve_stdio(factory)
        return

    server = await start_tcp_server(args.host, args.tcp_port, factory)
    async with server:
        await server.serve_forever()


def run() -> None:
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass


if __name__ == '__main__':
    run()
