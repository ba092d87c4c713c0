#!/usr/bin/env python
# -*- encoding: utf-8 -*-
# PYTHON_ARGCOMPLETE_OK

import argparse
import os
import sys
from typing import NamedTuple, Type

import argcomplete

import aeskw.exception
from aeskw.variant import VARIANTS


class _ExceptionMapping(NamedTuple):
    exception: Type[BaseException]
    exit_code: int
    include_stacktrace: bool


def completion(shell: str) -> None:
    print(argcomplete.shellcode([os.path.basename(sys.argv[0])], shell=shell))


def _add_operation_parser(subparsers_root, name: str, func: str, help: str, data_help: str) -> None:
    p = subparsers_root.add_parser(name, help=help, formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    p.add_argument('-k', '--kek', required=True, help='Key encryption key (encoded)')
    p.add_argument('-V',
                   '--variant',
                   choices=list(VARIANTS.keys()),
                   default=None,
                   help='Key wrap variant (if unspecified the configured variant is used)')
    p.add_argument('data', help=data_help)
    p.set_defaults(func=func)


def main():
    parser = argparse.ArgumentParser(formatter_class=argparse.ArgumentDefaultsHelpFormatter, allow_abbrev=False)

    parser.add_argument('-c', '--config-file', default=None, type=str, help='Specify a non-default configuration file')
    parser.add_argument('-m',
                        '--machine-output',
                        action='store_true',
                        default=False,
                        help='Enable machine-readable JSON output')
    parser.add_argument('--log-level',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        default='INFO',
                        help='Only log messages of this level or above on the console')
    parser.add_argument('--no-color',
                        action='store_true',
                        default=False,
                        help='Disable colorization of console logging')

    subparsers_root = parser.add_subparsers(title='commands')

    # COMPLETION
    p = subparsers_root.add_parser('completion', help='Emit autocompletion script')
    p.add_argument('shell', choices=['bash', 'tcsh'], help='Shell')
    p.set_defaults(func='completion')

    # UNWRAP
    _add_operation_parser(subparsers_root,
                          'unwrap',
                          'unwrap',
                          help='Unwrap a key (RFC 3394)',
                          data_help='Wrapped key (encoded)')

    # UNWRAP-PAD
    _add_operation_parser(subparsers_root,
                          'unwrap-pad',
                          'unwrap_pad',
                          help='Unwrap a key wrapped with padding (RFC 5649)',
                          data_help='Wrapped key (encoded)')

    # VERSION-INFO
    p = subparsers_root.add_parser('version-info', help='Program version information')
    p.set_defaults(func='version_info')

    # WRAP
    _add_operation_parser(subparsers_root,
                          'wrap',
                          'wrap',
                          help='Wrap a key of at least 16 bytes, a multiple of 8 bytes long (RFC 3394)',
                          data_help='Key to wrap (encoded)')

    # WRAP-PAD
    _add_operation_parser(subparsers_root,
                          'wrap-pad',
                          'wrap_pad',
                          help='Wrap a key of arbitrary length (RFC 5649)',
                          data_help='Key to wrap (encoded)')

    argcomplete.autocomplete(parser)
    args = parser.parse_args()

    if not hasattr(args, 'func'):
        parser.print_usage()
        sys.exit(os.EX_USAGE)

    if args.func == 'completion':
        completion(args.shell)
        sys.exit(os.EX_OK)

    from aeskw.config import Config
    from aeskw.logging import logger, init_logging, install_excepthook
    install_excepthook()
    if args.config_file is not None and args.config_file != '':
        try:
            cfg = open(args.config_file, 'r', encoding='utf-8').read()
        except FileNotFoundError:
            logger.error('File {} not found.'.format(args.config_file))
            sys.exit(os.EX_USAGE)
        config = Config(ad_hoc_config=cfg)
    else:
        config = Config()

    console_formatter = 'console-colored'
    if args.machine_output:
        console_formatter = 'json'
    elif args.no_color:
        console_formatter = 'console-plain'

    init_logging(logfile=config.get('logFile', None, types=(str, type(None))),
                 console_level=args.log_level,
                 console_formatter=console_formatter)

    import aeskw.commands
    commands = aeskw.commands.Commands(args.machine_output, config)
    func = getattr(commands, args.func)

    # Pass over to function
    func_args = dict(args._get_kwargs())
    del func_args['config_file']
    del func_args['func']
    del func_args['log_level']
    del func_args['machine_output']
    del func_args['no_color']

    # From most specific to least specific
    # yapf: disable
    exception_mappings = [
        _ExceptionMapping(exception=aeskw.exception.UsageError, exit_code=os.EX_USAGE, include_stacktrace=False),
        _ExceptionMapping(exception=aeskw.exception.InternalError, exit_code=os.EX_SOFTWARE, include_stacktrace=True),
        _ExceptionMapping(exception=aeskw.exception.ConfigurationError, exit_code=os.EX_CONFIG, include_stacktrace=False),
        _ExceptionMapping(exception=aeskw.exception.CipherOperationFailed, exit_code=os.EX_SOFTWARE, include_stacktrace=True),
        _ExceptionMapping(exception=aeskw.exception.InputDataError, exit_code=os.EX_DATAERR, include_stacktrace=False),
        _ExceptionMapping(exception=aeskw.exception.UnwrapError, exit_code=os.EX_DATAERR, include_stacktrace=False),
        _ExceptionMapping(exception=PermissionError, exit_code=os.EX_NOPERM, include_stacktrace=False),
        _ExceptionMapping(exception=FileNotFoundError, exit_code=os.EX_NOINPUT, include_stacktrace=False),
        _ExceptionMapping(exception=OSError, exit_code=os.EX_OSERR, include_stacktrace=True),
        _ExceptionMapping(exception=KeyboardInterrupt, exit_code=os.EX_NOINPUT, include_stacktrace=False),
        _ExceptionMapping(exception=BaseException, exit_code=os.EX_SOFTWARE, include_stacktrace=True),
    ]
    # yapf: enable

    try:
        # Arguments carry key material, only log their names.
        logger.debug('commands.{0}({1})'.format(args.func, ', '.join(func_args.keys())))
        func(**func_args)
        sys.exit(os.EX_OK)
    except SystemExit:
        raise
    except BaseException as exception:
        for case in exception_mappings:
            if isinstance(exception, case.exception):
                message = str(exception)
                if message:
                    message = '{}: {}'.format(exception.__class__.__name__, message)
                else:
                    message = '{} exception occurred.'.format(exception.__class__.__name__)
                if case.include_stacktrace:
                    logger.error(message, exc_info=True)
                else:
                    logger.debug(message, exc_info=True)
                    logger.error(message)
                sys.exit(case.exit_code)


if __name__ == '__main__':
    main()
