import asyncio
import functools
import logging
import sys
from typing import Callable

from atparser.processor import ATCommandProcessor

logger = logging.getLogger(__name__)

ProcessorFactory = Callable[[Callable[[bytes], None]], ATCommandProcessor]

READ_SIZE = 1024


async def handle_tcp_client(reader: asyncio.StreamReader,
                            writer: asyncio.StreamWriter,
                            processor_factory: ProcessorFactory) -> None:
    """ Serve AT commands to one TCP client until it disconnects.

    :param reader: StreamReader for the client.
    :param writer: StreamWriter for the client.
    :param processor_factory: Builds a processor writing to the given output callback.
    """
    peer = writer.get_extra_info('peername')
    processor = processor_factory(writer.write)
    processor.on_connect()
    logger.info('Client %s connected', peer)
    try:
        while True:
            data = await reader.read(READ_SIZE)
            if not data:
                break
            processor.receive(data)
            await writer.drain()
    except OSError as e:
        logger.warning('Connection with %s failed: %s', peer, e)
    finally:
        processor.on_disconnect()
        writer.close()
        try:
            await writer.wait_closed()
        except OSError:
            pass
        logger.info('Client %s disconnected', peer)


async def start_tcp_server(host: str, port: int, processor_factory: ProcessorFactory) -> asyncio.AbstractServer:
    server = await asyncio.start_server(
        functools.partial(handle_tcp_client, processor_factory=processor_factory), host, port
    )
    for sock in server.sockets:
        logger.info('Listening on %s', sock.getsockname())
    return server


async def serve_stdio(processor_factory: ProcessorFactory) -> None:
    """ Serve AT commands over stdin/stdout until end of input. """
    def send_to_stdout(data: bytes) -> None:
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()

    processor = processor_factory(send_to_stdout)
    processor.on_connect()
    loop = asyncio.get_running_loop()
    try:
        while True:
            data = await loop.run_in_executor(None, sys.stdin.buffer.readline)
            if not data:
                break
            processor.receive(data)
    finally:
        processor.on_disconnect()
