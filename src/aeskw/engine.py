#!/usr/bin/env python
# -*- encoding: utf-8 -*-
'''
Key wrapping and unwrapping of 64 bit blocks as defined in RFC 3394 section 2.2.
http://www.ietf.org/rfc/rfc3394.txt
'''
from typing import List, Tuple

from Crypto.Util.strxor import strxor

from aeskw.cipher import BlockCipherBase
from aeskw.exception import NoBlocks
from aeskw.utils import uint64, msb64, lsb64

ROUNDS = 6


def wrap_blocks(cipher: BlockCipherBase, kek: bytes, P: List[bytes], iv: bytes) -> List[bytes]:
    '''
    Alternative (in place) form of the wrapping process from RFC 3394 section 2.2.1.

    Takes the plaintext P as n 64 bit blocks and returns the ciphertext as n+1 64 bit blocks
    with the integrity check value in C[0].
    '''
    n = len(P)
    A = iv
    #NOTE: R[0] is never accessed, left in for consistency with RFC indices
    R = [b''] + list(P)
    for j in range(ROUNDS):
        for i in range(1, n + 1):
            B = cipher.encrypt_block(kek, A + R[i])
            A = strxor(msb64(B), uint64(n * j + i))
            R[i] = lsb64(B)
    return [A] + R[1:]


def unwrap_blocks(cipher: BlockCipherBase, kek: bytes, C: List[bytes]) -> Tuple[bytes, List[bytes]]:
    '''
    Index based form of the unwrapping process from RFC 3394 section 2.2.2.

    Returns the integrity value A and the n plaintext blocks. The integrity value is not checked here.
    '''
    n = len(C) - 1
    if n < 1:
        raise NoBlocks('Ciphertext contains no blocks to unwrap.')
    A = C[0]
    R = list(C)
    for j in range(ROUNDS - 1, -1, -1):  #counting down
        for i in range(n, 0, -1):  #(n, n-1, ..., 1)
            B = cipher.decrypt_block(kek, strxor(A, uint64(n * j + i)) + R[i])
            A = msb64(B)
            R[i] = lsb64(B)
    return A, R[1:]
