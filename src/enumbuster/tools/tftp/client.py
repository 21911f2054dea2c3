"""Raw UDP exchange for TFTP read requests."""

import asyncio
import ipaddress
import socket

from .packets import OP_DATA, OP_OACK, build_error

_TRANSFER_OPCODES = (OP_DATA.to_bytes(2, "big"), OP_OACK.to_bytes(2, "big"))


def parse_server_address(server: str, default_port: int = 69) -> tuple[str, int]:
    """Parse ``host``, ``host:port`` or ``[ipv6]:port``."""
    text = server.strip()
    if not text:
        raise ValueError("TFTP server address is empty")
    host, port_text = text, ""
    if text.startswith("["):
        host, _, rest = text[1:].partition("]")
        if rest.startswith(":"):
            port_text = rest[1:]
    elif text.count(":") == 1:
        host, _, port_text = text.partition(":")
    elif text.count(":") > 1:
        ipaddress.ip_address(text)
    if not port_text:
        return host, default_port
    try:
        port = int(port_text)
    except ValueError:
        raise ValueError(f"Invalid TFTP server port in '{server}'") from None
    if not 0 < port < 65536:
        raise ValueError(f"Invalid TFTP server port in '{server}'")
    return host, port


class _ReplyProtocol(asyncio.DatagramProtocol):
    def __init__(self) -> None:
        self.reply: asyncio.Future[tuple[bytes, tuple]] = (
            asyncio.get_running_loop().create_future()
        )

    def datagram_received(self, data: bytes, addr: tuple) -> None:
        if not self.reply.done():
            self.reply.set_result((data, addr))

    def error_received(self, exc: Exception) -> None:
        if not self.reply.done():
            self.reply.set_exception(exc)

    def connection_lost(self, exc: Exception | None) -> None:
        if exc is not None and not self.reply.done():
            self.reply.set_exception(exc)


class TFTPClient:
    """Send one datagram and wait for the first reply.

    Each exchange uses a fresh ephemeral socket, so every request gets its own
    TFTP transfer id. Retries are the caller's concern.
    """

    def __init__(self, host: str, port: int = 69):
        self.host = host
        self.port = port
        self._address: tuple | None = None
        self._family = socket.AF_INET

    async def connect(self) -> tuple:
        """Resolve the server address once; raises ``OSError`` on failure."""
        if self._address is None:
            loop = asyncio.get_running_loop()
            infos = await loop.getaddrinfo(self.host, self.port, type=socket.SOCK_DGRAM)
            if not infos:
                raise OSError(f"Cannot resolve TFTP server {self.host}")
            self._family, _, _, _, self._address = infos[0]
        return self._address

    async def exchange(self, packet: bytes, timeout: float) -> bytes:
        """Send *packet* and return the first datagram received.

        Raises ``TimeoutError`` when nothing arrives within *timeout* seconds.
        """
        address = await self.connect()
        loop = asyncio.get_running_loop()
        transport, protocol = await loop.create_datagram_endpoint(
            _ReplyProtocol,
            family=self._family,
        )
        try:
            transport.sendto(packet, address)
            data, addr = await asyncio.wait_for(protocol.reply, timeout=timeout)
            if data[:2] in _TRANSFER_OPCODES:
                # Servers answer from a new port; abort the transfer there.
                transport.sendto(build_error(0, "transfer aborted"), addr)
            return data
        finally:
            transport.close()
