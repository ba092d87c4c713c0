#!/usr/bin/env python
# -*- encoding: utf-8 -*-
'''
Alternative initial value and padding for AES key wrapping, as defined in RFC 5649 section 3.
http://www.ietf.org/rfc/rfc5649.txt
'''
from typing import List, Tuple

from aeskw.exception import IntegrityCheckFailed, InvalidMessageLength, InvalidPadding
from aeskw.utils import SEMIBLOCK_SIZE, uint32, parse_uint32, constant_time_compare

AIV_HI = b'\xa6\x59\x59\xa6'
MAX_KEY_LENGTH = 2**32 - 1


def pad_key(key: bytes) -> Tuple[bytes, bytes]:
    """ Zero pad key to a multiple of 64 bits and compute the AIV carrying the original length (MLI).
    """
    key_len = len(key)
    padded_key = key + b'\0' * ((SEMIBLOCK_SIZE - key_len) % SEMIBLOCK_SIZE)
    return padded_key, AIV_HI + uint32(key_len)


def check_padded_integrity(A: bytes) -> None:
    if not constant_time_compare(A[:4], AIV_HI):
        raise IntegrityCheckFailed('Integrity check failed.')


def verify_padding(P: List[bytes], A: bytes) -> int:
    """ Check the MLI in A against the number of plaintext blocks and verify the zero padding.

    Returns the length of the key without padding.
    """
    key_len = parse_uint32(A[4:8])
    n = len(P)
    if not SEMIBLOCK_SIZE * (n - 1) < key_len <= SEMIBLOCK_SIZE * n:
        raise InvalidMessageLength('Invalid message length.')

    b = SEMIBLOCK_SIZE - key_len % SEMIBLOCK_SIZE
    if b < SEMIBLOCK_SIZE:
        if not constant_time_compare(P[-1][-b:], b'\0' * b):
            raise InvalidPadding('Invalid padding.')

    return key_len
