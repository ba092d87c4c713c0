__all__ = ['__version__', 'AESKeyWrap', 'DEFAULT_IV', 'AES_128', 'AES_192', 'AES_256', 'aes_kw_128', 'aes_kw_192',
           'aes_kw_256']
from ._version import __version__
del _version  # remove to avoid confusion with __version__

from aeskw.aes_keywrap import AESKeyWrap, DEFAULT_IV, aes_kw_128, aes_kw_192, aes_kw_256
from aeskw.variant import AES_128, AES_192, AES_256
