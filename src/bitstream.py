# filename: bitstream.py

from bitarray import bitarray

from huffman_core import InvalidBitError


def padding_length(bit_count):
    # Always 1..8, so an already aligned string still gets a full pad byte
    return 8 - (bit_count % 8)


def pack_bits(bits):
    """Pack a string of '0'/'1' characters into bytes.

    The string is prefixed with ``padding_length - 1`` zeros and a single one
    so that its length becomes a multiple of 8; the one marks where the
    payload starts. Bytes are written most significant bit first.
    """
    for position, bit in enumerate(bits):
        if bit != "0" and bit != "1":
            raise InvalidBitError(
                f"invalid bit character {bit!r} at position {position}")

    pad = padding_length(len(bits))
    buffer = bitarray("0" * (pad - 1) + "1" + bits, endian="big")
    return buffer.tobytes()


def unpack_bits(data):
    """Expand packed bytes back into the original '0'/'1' string."""
    if not data:
        return ""
    buffer = bitarray(endian="big")
    buffer.frombytes(bytes(data))
    bits = buffer.to01()

    marker = bits.find("1", 0, 8)
    if marker == -1:
        return bits[8:]
    return bits[marker + 1:]
