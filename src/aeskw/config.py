#!/usr/bin/env python3
# -*- encoding: utf-8 -*-
import binascii
import os
import re
from os.path import expanduser
from typing import List, Callable, Dict, Any, Optional, Sequence

import semantic_version
from cerberus import Validator, SchemaError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from aeskw.aes_keywrap import AESKeyWrap, DEFAULT_IV
from aeskw.exception import ConfigurationError, InternalError
from aeskw.logging import logger
from aeskw.variant import get_variant
from aeskw.versions import VERSIONS


def _load_yaml(stream) -> Any:
    return YAML(typ='safe', pure=True).load(stream)


class Config:
    _CONFIG_DIRS = ['/etc', '/etc/aeskw']
    _CONFIG_FILE = 'aeskw.yaml'
    _CONFIGURATION_VERSION_KEY = 'configurationVersion'
    _CONFIGURATION_VERSION_REGEX = r'\d+'
    _YAML_SUFFIX = '.yaml'
    _SCHEMA_DIR = os.path.join(os.path.dirname(__file__), 'schemas')

    _SCHEMA_VERSIONS = [semantic_version.Version('1.0.0')]

    _DEFAULT_CONFIG = "configurationVersion: '{}'".format(VERSIONS.configuration.current.major)

    _schema_registry: Dict[str, Dict] = {}

    @staticmethod
    def _schema_name(module: str, version: semantic_version.Version) -> str:
        return '{}-v{}'.format(module, version.major)

    @classmethod
    def add_schema(cls, *, module: str, version: semantic_version.Version, file: str) -> None:
        name = cls._schema_name(module, version)
        try:
            with open(file, 'r') as f:
                schema = _load_yaml(f)
            cls._schema_registry[name] = schema
        except FileNotFoundError:
            raise InternalError('Schema {} not found or not accessible.'.format(file))
        except YAMLError as exception:
            raise InternalError('Schema {} is invalid.'.format(file)) from exception

    class _Validator(Validator):

        def _normalize_coerce_to_string(self, value):
            return str(value)

    def _get_validator(self, *, module: str, version: semantic_version.Version) -> Validator:
        name = self._schema_name(module, version)
        try:
            schema = self._schema_registry[name]
        except KeyError:
            raise InternalError('Schema for module {} is missing.'.format(name))
        try:
            validator = Config._Validator(schema)
        except SchemaError as exception:
            logger.error('Schema {} validation errors:'.format(name))
            self._output_validation_errors(exception.args[0])
            raise InternalError('Schema {} is invalid.'.format(name)) from exception
        return validator

    @staticmethod
    def _output_validation_errors(errors) -> None:

        def traverse(cursor, path=''):
            if isinstance(cursor, dict):
                for key, value in cursor.items():
                    traverse(value, path + ('.' if path else '') + str(key))
            elif isinstance(cursor, list):
                for value in cursor:
                    if isinstance(value, dict):
                        traverse(value, path)
                    else:
                        logger.error('  {}: {}'.format(path, value))

        traverse(errors)

    def validate(self, *, module: str, version: semantic_version.Version = None,
                 config: Optional[Dict]) -> Dict:
        validator = self._get_validator(module=module, version=self._config_version if version is None else version)
        if not validator.validate({'configuration': config if config is not None else {}}):
            logger.error('Configuration validation errors:')
            self._output_validation_errors(validator.errors)
            raise ConfigurationError('Configuration for module {} is invalid.'.format(module))

        return validator.document['configuration']

    def __init__(self, ad_hoc_config: str = None, sources: Sequence[str] = None) -> None:
        if ad_hoc_config is None:
            if not sources:
                sources = self._get_sources()

            config = None
            for source in sources:
                if os.path.isfile(source):
                    try:
                        with open(source, 'r', encoding='utf-8') as f:
                            config = _load_yaml(f)
                    except (OSError, YAMLError) as exception:
                        raise ConfigurationError('Configuration file {} is invalid.'.format(source)) from exception
                    if config is None:
                        raise ConfigurationError('Configuration file {} is empty.'.format(source))
                    logger.debug('Using configuration file {}.'.format(source))
                    break

            if config is None:
                logger.debug('No configuration file found in the default places ({}), using defaults.'.format(
                    ', '.join(sources)))
                config = _load_yaml(self._DEFAULT_CONFIG)
        else:
            try:
                config = _load_yaml(ad_hoc_config)
            except YAMLError as exception:
                raise ConfigurationError('Configuration string is invalid.') from exception
            if config is None:
                raise ConfigurationError('Configuration string is empty.')

        if not isinstance(config, dict):
            raise ConfigurationError('Configuration must be a mapping.')

        if self._CONFIGURATION_VERSION_KEY not in config:
            raise ConfigurationError('Configuration is missing required key "{}".'.format(
                self._CONFIGURATION_VERSION_KEY))

        version = str(config[self._CONFIGURATION_VERSION_KEY])
        if not re.fullmatch(self._CONFIGURATION_VERSION_REGEX, version):
            raise ConfigurationError('Configuration has invalid version of "{}".'.format(version))

        version_obj = semantic_version.Version.coerce(version)
        if version_obj not in VERSIONS.configuration.supported:
            raise ConfigurationError('Configuration has unsupported version of "{}".'.format(version))

        self._config_version = version_obj
        self._config: Dict[str, Any] = self.validate(module=__name__, config=config)
        logger.debug('Loaded configuration: {}'.format(self._config))

    def _get_sources(self) -> List[str]:
        sources = []
        for directory in self._CONFIG_DIRS:
            sources.append('{directory}/{file}'.format(directory=directory, file=self._CONFIG_FILE))
        sources.append(expanduser('~/.{file}'.format(file=self._CONFIG_FILE)))
        sources.append(expanduser('~/{file}'.format(file=self._CONFIG_FILE)))
        return sources

    def get(self,
            name: str,
            *args,
            types: Any = None,
            check_func: Callable[[Any], bool] = None,
            check_message: str = None) -> Any:
        """ Return the validated value of option name. A single positional argument is returned when the option
        is missing, otherwise a missing option raises KeyError.
        """
        if len(args) > 1:
            raise InternalError('Called with more than two arguments for key {}.'.format(name))

        if name not in self._config:
            if args:
                return args[0]
            raise KeyError('Config option {} is missing.'.format(name))

        value = self._config[name]
        if types is not None and not isinstance(value, types):
            raise TypeError('Config value {} has wrong type {}, expected {}.'.format(name, type(value), types))
        if check_func is not None and not check_func(value):
            if check_message is None:
                raise ConfigurationError(
                    'Config option {} has the right type but the supplied value is invalid.'.format(name))
            raise ConfigurationError('Config option {} is invalid: {}.'.format(name, check_message))
        return value

    def key_wrap(self, variant_name: Optional[str] = None) -> AESKeyWrap:
        """ Build the configured key wrap algorithm. variant_name overrides the configured variant.
        """
        if variant_name is None:
            variant_name = self.get('variant', types=str)
        iv_hex: Optional[str] = self.get('iv', None, types=(str, type(None)))
        iv = binascii.unhexlify(iv_hex) if iv_hex is not None else DEFAULT_IV
        return AESKeyWrap(get_variant(variant_name), iv=iv)


for version_obj in Config._SCHEMA_VERSIONS:
    schema_base_path = os.path.join(Config._SCHEMA_DIR, 'v{}'.format(version_obj.major))
    for filename in os.listdir(schema_base_path):
        full_path = os.path.join(schema_base_path, filename)
        if not os.path.isfile(full_path) or not full_path.endswith(Config._YAML_SUFFIX):
            continue
        module = filename[0:len(filename) - len(Config._YAML_SUFFIX)]
        logger.debug('Loading schema {} for module {}, version v{}.'.format(full_path, module, str(version_obj)))
        Config.add_schema(module=module, version=version_obj, file=full_path)
