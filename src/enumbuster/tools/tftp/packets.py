"""TFTP (RFC 1350 / RFC 2348) packet encoding and decoding."""

import struct
from dataclasses import dataclass

OP_RRQ = 1
OP_WRQ = 2
OP_DATA = 3
OP_ACK = 4
OP_ERROR = 5
OP_OACK = 6

TRANSFER_MODE = b"octet"
BLOCK_SIZE = 512


@dataclass(frozen=True)
class TFTPReply:
    """Decoded server reply."""

    opcode: int
    error_code: int | None = None
    message: str = ""

    @property
    def exists(self) -> bool:
        return self.opcode in (OP_DATA, OP_OACK, OP_ACK)


def build_read_request(filename: str, block_size: int = BLOCK_SIZE) -> bytes:
    """RRQ: opcode | filename | 0 | mode | 0 | blksize | 0 | size | 0."""
    return b"".join(
        [
            struct.pack("!H", OP_RRQ),
            filename.encode("utf-8", errors="replace"),
            b"\x00",
            TRANSFER_MODE,
            b"\x00",
            b"blksize",
            b"\x00",
            str(block_size).encode("ascii"),
            b"\x00",
        ]
    )


def build_error(code: int = 0, message: str = "") -> bytes:
    """ERROR: opcode | error code | message | 0."""
    return struct.pack("!HH", OP_ERROR, code) + message.encode("utf-8") + b"\x00"


def parse_reply(datagram: bytes) -> TFTPReply:
    """Decode the opcode (and error details) of a server datagram."""
    if len(datagram) < 4:
        raise ValueError(f"Short TFTP packet ({len(datagram)} bytes)")
    (opcode,) = struct.unpack("!H", datagram[:2])
    if opcode == OP_ERROR:
        (code,) = struct.unpack("!H", datagram[2:4])
        message = datagram[4:].split(b"\x00", 1)[0].decode("utf-8", errors="replace")
        return TFTPReply(opcode=opcode, error_code=code, message=message)
    if opcode not in (OP_DATA, OP_ACK, OP_OACK):
        raise ValueError(f"Unexpected TFTP opcode {opcode}")
    return TFTPReply(opcode=opcode)
