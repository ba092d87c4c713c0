#!/usr/bin/env python
# -*- encoding: utf-8 -*-
import hmac
import struct
from typing import List

# RFC 3394 works on 64 bit registers.
SEMIBLOCK_SIZE = 8

QUAD = struct.Struct('>Q')
LONG = struct.Struct('>L')


def uint64(num: int) -> bytes:
    """ Encode num as an unsigned 64 bit integer, most significant byte first.
    """
    if not 0 <= num < 2**64:
        raise ValueError('Value {} does not fit into an unsigned 64 bit integer.'.format(num))
    return QUAD.pack(num)


def uint32(num: int) -> bytes:
    if not 0 <= num < 2**32:
        raise ValueError('Value {} does not fit into an unsigned 32 bit integer.'.format(num))
    return LONG.pack(num)


def parse_uint32(data: bytes) -> int:
    return LONG.unpack(data)[0]


def msb64(block: bytes) -> bytes:
    return block[:SEMIBLOCK_SIZE]


def lsb64(block: bytes) -> bytes:
    return block[-SEMIBLOCK_SIZE:]


def split_blocks(data: bytes) -> List[bytes]:
    """ Split data into 64 bit blocks. The length of data must be a multiple of eight.
    """
    return [data[i:i + SEMIBLOCK_SIZE] for i in range(0, len(data), SEMIBLOCK_SIZE)]


def constant_time_compare(a: bytes, b: bytes) -> bool:
    return hmac.compare_digest(a, b)
