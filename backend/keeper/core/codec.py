"""
Checksum and gzip framing without a compression library.

The repository feeds served to YUM/DNF clients must be gzip streams, but
the environment these handlers run in cannot link zlib. ``gzip_stored``
therefore emits a valid gzip member whose deflate payload consists only
of stored (uncompressed) blocks, and ``crc32`` computes the trailer
checksum bit by bit.

Layout of the output (RFC 1952 / RFC 1951):

    1f 8b 08 00 | 00 00 00 00 | 00 ff          10-byte header
    [BFINAL] LEN NLEN <LEN raw bytes>          repeated per block
    CRC32 ISIZE                                little-endian trailer
"""

import struct

MAGIC_GZIP = b"\x1f\x8b"
METHOD_DEFLATE = 8
OS_UNKNOWN = 0xFF

# Largest payload a single stored block can carry (LEN is 16 bits)
MAX_STORED_BLOCK = 0xFFFF

# Reflected form of the ISO-3309 / ITU-T V.42 polynomial 0x04C11DB7
CRC32_POLYNOMIAL = 0xEDB88320

GZIP_HEADER = MAGIC_GZIP + bytes(
    [
        METHOD_DEFLATE,  # CM
        0,  # FLG: no name, comment, extra or header CRC
        0,  # MTIME (4 bytes, zero = not available)
        0,
        0,
        0,
        0,  # XFL
        OS_UNKNOWN,
    ]
)


def crc32(data: bytes, crc: int = 0) -> int:
    """
    Compute the CRC-32 of ``data``.

    ``crc`` is a previously returned value, allowing the checksum of a
    stream to be built up chunk by chunk.
    """
    crc ^= 0xFFFFFFFF
    for byte in data:
        crc ^= byte
        for _ in range(8):
            if crc & 1:
                crc = (crc >> 1) ^ CRC32_POLYNOMIAL
            else:
                crc >>= 1
    return crc ^ 0xFFFFFFFF


def deflate_stored(data: bytes) -> bytes:
    """Frame ``data`` as a raw deflate stream made of stored blocks."""
    out = bytearray()
    offset = 0
    while True:
        chunk = data[offset : offset + MAX_STORED_BLOCK]
        offset += len(chunk)
        final = offset >= len(data)

        # BFINAL in bit 0, BTYPE=00; the rest of the byte pads to the boundary
        out.append(1 if final else 0)
        length = len(chunk)
        out += struct.pack("<HH", length, length ^ 0xFFFF)
        out += chunk

        if final:
            return bytes(out)


def gzip_stored(data: bytes) -> bytes:
    """Wrap ``data`` in a gzip member without compressing it."""
    trailer = struct.pack("<II", crc32(data), len(data) & 0xFFFFFFFF)
    return GZIP_HEADER + deflate_stored(data) + trailer
