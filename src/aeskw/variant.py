#!/usr/bin/env python
# -*- encoding: utf-8 -*-
from typing import NamedTuple, Dict

from aeskw.exception import ConfigurationError


class Variant(NamedTuple):
    name: str
    kek_size: int
    cipher_identifier: str
    cipher_block_size: int


AES_128 = Variant(name='aes128', kek_size=16, cipher_identifier='AES-128-ECB', cipher_block_size=16)
AES_192 = Variant(name='aes192', kek_size=24, cipher_identifier='AES-192-ECB', cipher_block_size=16)
AES_256 = Variant(name='aes256', kek_size=32, cipher_identifier='AES-256-ECB', cipher_block_size=16)

VARIANTS: Dict[str, Variant] = {variant.name: variant for variant in (AES_128, AES_192, AES_256)}


def get_variant(name: str) -> Variant:
    """ Look up a variant by its name (aes128) or by its cipher identifier (AES-128-ECB).
    """
    lookup_name = name.lower()
    for variant in VARIANTS.values():
        if lookup_name in (variant.name, variant.cipher_identifier.lower()):
            return variant
    raise ConfigurationError('Key wrap variant {} is unknown, supported are {}.'.format(name, ', '.join(VARIANTS.keys())))
