#!/usr/bin/env python
# -*- encoding: utf-8 -*-
'''
Key wrapping and unwrapping as defined in RFC 3394 and the padding variant defined in RFC 5649.
The purpose of these algorithms is to encrypt key material under a key encryption key (KEK)
with integrity protection.
'''
from typing import Optional

from aeskw.cipher import BlockCipherBase, create_block_cipher
from aeskw.engine import wrap_blocks, unwrap_blocks
from aeskw.exception import ConstructionError, InvalidIV, InvalidKeyLength, EmptyKey, InvalidKEKSize, \
    InvalidCiphertextLength, IntegrityCheckFailed
from aeskw.logging import logger
from aeskw.padding import MAX_KEY_LENGTH, pad_key, check_padded_integrity, verify_padding
from aeskw.utils import SEMIBLOCK_SIZE, split_blocks, constant_time_compare
from aeskw.variant import Variant, AES_128, AES_192, AES_256

# RFC 3394 section 2.2.3.1
DEFAULT_IV = b'\xa6' * 8


class AESKeyWrap:

    def __init__(self, variant: Variant, *, iv: bytes = DEFAULT_IV, cipher: Optional[BlockCipherBase] = None) -> None:
        if len(iv) != SEMIBLOCK_SIZE:
            raise InvalidIV('IV must be {} bytes long, got {}.'.format(SEMIBLOCK_SIZE, len(iv)))

        if cipher is None:
            cipher = create_block_cipher(variant.cipher_identifier)
        if cipher.block_size != variant.cipher_block_size:
            raise ConstructionError('Block cipher {} has a block size of {} bytes, expected {}.'.format(
                cipher.identifier, cipher.block_size, variant.cipher_block_size))

        self._variant = variant
        self._iv = bytes(iv)
        self._cipher = cipher
        logger.debug('Using key wrap variant {} with block cipher {}.'.format(variant.name, cipher.identifier))

    def __repr__(self) -> str:
        return '{}(variant={}, cipher={!r})'.format(self.__class__.__name__, self._variant.name, self._cipher)

    @property
    def variant(self) -> Variant:
        return self._variant

    @property
    def iv(self) -> bytes:
        return self._iv

    def _check_kek_size(self, kek: bytes) -> None:
        if len(kek) != self._variant.kek_size:
            raise InvalidKEKSize('KEK must be {} bytes long, got {}.'.format(self._variant.kek_size, len(kek)))

    @staticmethod
    def _check_ciphertext_length(ciphertext: bytes) -> None:
        if len(ciphertext) % SEMIBLOCK_SIZE != 0:
            raise InvalidCiphertextLength('Ciphertext length must be a multiple of 64 bits, got {} bytes.'.format(
                len(ciphertext)))

    def wrap(self, key: bytes, kek: bytes) -> bytes:
        '''
        Wrap key as defined in RFC 3394 section 2.2.1.

        The key must be at least 16 bytes long and its length a multiple of 64 bits. Use wrap_pad() for keys of
        arbitrary length.
        '''
        # RFC 3394 requires at least two blocks
        if len(key) < 2 * SEMIBLOCK_SIZE:
            raise InvalidKeyLength('Key must be at least {} bytes long, got {}.'.format(2 * SEMIBLOCK_SIZE, len(key)))
        if len(key) % SEMIBLOCK_SIZE != 0:
            raise InvalidKeyLength('Key length must be a multiple of 64 bits, got {} bytes.'.format(len(key)))
        self._check_kek_size(kek)

        return b''.join(wrap_blocks(self._cipher, kek, split_blocks(key), self._iv))

    def unwrap(self, ciphertext: bytes, kek: bytes) -> bytes:
        '''
        Unwrap a key wrapped with wrap() as defined in RFC 3394 section 2.2.2.
        '''
        self._check_ciphertext_length(ciphertext)
        self._check_kek_size(kek)

        A, R = unwrap_blocks(self._cipher, kek, split_blocks(ciphertext))
        if not constant_time_compare(A, self._iv):
            raise IntegrityCheckFailed('Integrity check failed.')
        return b''.join(R)

    def wrap_pad(self, key: bytes, kek: bytes) -> bytes:
        '''
        Wrap a key of arbitrary (non-zero) length as defined in RFC 5649 section 4.1.
        '''
        if not key:
            raise EmptyKey('Key must be at least one byte long.')
        # The MLI is a 32 bit integer
        if len(key) > MAX_KEY_LENGTH:
            raise InvalidKeyLength('Key must be at most {} bytes long, got {}.'.format(MAX_KEY_LENGTH, len(key)))
        self._check_kek_size(kek)

        padded_key, aiv = pad_key(key)
        # A single block is encrypted directly: C[0] | C[1] = ENC(K, A | P[1])
        if len(padded_key) == SEMIBLOCK_SIZE:
            return self._cipher.encrypt_block(kek, aiv + padded_key)
        return b''.join(wrap_blocks(self._cipher, kek, split_blocks(padded_key), aiv))

    def unwrap_pad(self, ciphertext: bytes, kek: bytes) -> bytes:
        '''
        Unwrap a key wrapped with wrap_pad() as defined in RFC 5649 section 4.2.
        '''
        self._check_ciphertext_length(ciphertext)
        self._check_kek_size(kek)

        C = split_blocks(ciphertext)
        if len(C) == 2:
            B = self._cipher.decrypt_block(kek, C[0] + C[1])
            A, P = B[:SEMIBLOCK_SIZE], [B[SEMIBLOCK_SIZE:]]
        else:
            A, P = unwrap_blocks(self._cipher, kek, C)

        check_padded_integrity(A)
        key_len = verify_padding(P, A)
        return b''.join(P)[:key_len]


def aes_kw_128(iv: bytes = DEFAULT_IV) -> AESKeyWrap:
    return AESKeyWrap(AES_128, iv=iv)


def aes_kw_192(iv: bytes = DEFAULT_IV) -> AESKeyWrap:
    return AESKeyWrap(AES_192, iv=iv)


def aes_kw_256(iv: bytes = DEFAULT_IV) -> AESKeyWrap:
    return AESKeyWrap(AES_256, iv=iv)
