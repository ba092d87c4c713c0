#!/usr/bin/env python
# -*- encoding: utf-8 -*-


class AESKWException(Exception):
    pass


class UsageError(AESKWException, RuntimeError):
    pass


class InternalError(AESKWException, RuntimeError):
    pass


class ConfigurationError(AESKWException, RuntimeError):
    pass


# Caller supplied something that can never be wrapped or unwrapped.
class InputDataError(AESKWException, ValueError):
    pass


class ConstructionError(InputDataError):
    pass


class InvalidIV(ConstructionError):
    pass


class InvalidKeyLength(InputDataError):
    pass


class EmptyKey(InvalidKeyLength):
    pass


class InvalidKEKSize(InputDataError):
    pass


class InvalidCiphertextLength(InputDataError):
    pass


class NoBlocks(InvalidCiphertextLength):
    pass


# Ciphertext was well-formed but did not verify under the KEK.
class UnwrapError(AESKWException, ValueError):
    pass


class IntegrityCheckFailed(UnwrapError):
    pass


class InvalidMessageLength(UnwrapError):
    pass


class InvalidPadding(UnwrapError):
    pass


class CipherOperationFailed(AESKWException, RuntimeError):
    pass
