#!/usr/bin/env python
# -*- encoding: utf-8 -*-
from abc import abstractmethod, ABCMeta
from typing import Dict

from Crypto.Cipher import AES

from aeskw.exception import CipherOperationFailed, ConfigurationError
from aeskw.logging import logger


class BlockCipherBase(metaclass=ABCMeta):
    """ Single block encryption and decryption keyed by the KEK.

    Implementations operate on exactly one native cipher block per call, without chaining and without padding.
    """

    def __init__(self, *, identifier: str) -> None:
        self._identifier = identifier

    def __repr__(self) -> str:
        return '{}(identifier={!r})'.format(self.__class__.__name__, self._identifier)

    @property
    def identifier(self) -> str:
        return self._identifier

    @property
    @abstractmethod
    def block_size(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def encrypt_block(self, kek: bytes, block: bytes) -> bytes:
        raise NotImplementedError

    @abstractmethod
    def decrypt_block(self, kek: bytes, block: bytes) -> bytes:
        raise NotImplementedError


class AESECBCipher(BlockCipherBase):

    def __init__(self, *, identifier: str, key_size: int) -> None:
        super().__init__(identifier=identifier)
        self._key_size = key_size

    @property
    def block_size(self) -> int:
        return AES.block_size

    def _check_inputs(self, operation: str, kek: bytes, block: bytes) -> None:
        if len(kek) != self._key_size:
            raise CipherOperationFailed('{} {} failed: key must be {} bytes long, got {}.'.format(
                self._identifier, operation, self._key_size, len(kek)))
        if len(block) != AES.block_size:
            raise CipherOperationFailed('{} {} failed: block must be {} bytes long, got {}.'.format(
                self._identifier, operation, AES.block_size, len(block)))

    def encrypt_block(self, kek: bytes, block: bytes) -> bytes:
        self._check_inputs('encryption', kek, block)
        try:
            return AES.new(kek, AES.MODE_ECB).encrypt(block)
        except (ValueError, TypeError) as exception:
            logger.debug('{} encryption failed: {}'.format(self._identifier, exception))
            raise CipherOperationFailed('{} encryption failed.'.format(self._identifier)) from exception

    def decrypt_block(self, kek: bytes, block: bytes) -> bytes:
        self._check_inputs('decryption', kek, block)
        try:
            return AES.new(kek, AES.MODE_ECB).decrypt(block)
        except (ValueError, TypeError) as exception:
            logger.debug('{} decryption failed: {}'.format(self._identifier, exception))
            raise CipherOperationFailed('{} decryption failed.'.format(self._identifier)) from exception


_AES_KEY_SIZES: Dict[str, int] = {
    'AES-128-ECB': 16,
    'AES-192-ECB': 24,
    'AES-256-ECB': 32,
}


def create_block_cipher(identifier: str) -> BlockCipherBase:
    try:
        key_size = _AES_KEY_SIZES[identifier]
    except KeyError:
        raise ConfigurationError('Block cipher {} is not supported.'.format(identifier)) from None
    return AESECBCipher(identifier=identifier, key_size=key_size)
