import base64
import binascii
import json
from typing import Callable

from aeskw import __version__
from aeskw.config import Config
from aeskw.exception import UsageError
from aeskw.logging import logger
from aeskw.versions import VERSIONS


class Commands:
    """Proxy between CLI calls and the key wrap algorithms."""

    def __init__(self, machine_output: bool, config: Config) -> None:
        self.machine_output = machine_output
        self.config = config
        self._encoding = config.get('encoding', 'hex', types=str)

    def _decode(self, name: str, value: str) -> bytes:
        try:
            if self._encoding == 'base64':
                return base64.b64decode(value, validate=True)
            else:
                return binascii.unhexlify(value)
        except (binascii.Error, ValueError) as exception:
            raise UsageError('Argument {} is not valid {}.'.format(name, self._encoding)) from exception

    def _encode(self, value: bytes) -> str:
        if self._encoding == 'base64':
            return base64.b64encode(value).decode('ascii')
        else:
            return binascii.hexlify(value).decode('ascii')

    def _run(self, operation: str, data: str, kek: str, variant: str) -> None:
        algorithm = self.config.key_wrap(variant)
        func: Callable[[bytes, bytes], bytes] = getattr(algorithm, operation)
        result = func(self._decode('data', data), self._decode('kek', kek))
        logger.debug('{} with variant {} produced {} bytes.'.format(operation, algorithm.variant.name, len(result)))

        if self.machine_output:
            print(
                json.dumps(
                    {
                        'operation': operation,
                        'variant': algorithm.variant.name,
                        'encoding': self._encoding,
                        'result': self._encode(result),
                    },
                    indent=4))
        else:
            print(self._encode(result))

    def wrap(self, data: str, kek: str, variant: str = None) -> None:
        self._run('wrap', data, kek, variant)

    def unwrap(self, data: str, kek: str, variant: str = None) -> None:
        self._run('unwrap', data, kek, variant)

    def wrap_pad(self, data: str, kek: str, variant: str = None) -> None:
        self._run('wrap_pad', data, kek, variant)

    def unwrap_pad(self, data: str, kek: str, variant: str = None) -> None:
        self._run('unwrap_pad', data, kek, variant)

    def version_info(self) -> None:
        if not self.machine_output:
            logger.info('aeskw version: {}.'.format(__version__))
            logger.info('Configuration version: {}, supported {}.'.format(VERSIONS.configuration.current,
                                                                          VERSIONS.configuration.supported))
        else:
            result = {
                'version': __version__,
                'configuration_version': {
                    'current': str(VERSIONS.configuration.current),
                    'supported': str(VERSIONS.configuration.supported)
                },
            }
            print(json.dumps(result, indent=4))
