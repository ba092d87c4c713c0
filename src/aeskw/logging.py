#!/usr/bin/env python
# -*- encoding: utf-8 -*-
import logging
import logging.config
import os
import string
import sys
import threading
from datetime import datetime
from io import StringIO
from typing import Dict, Optional, Union

import colorama
import structlog
from structlog._frames import _find_first_app_frame_and_name

from aeskw.exception import UsageError


def _sl_processor_add_source_context(_, __, event_dict: Dict) -> Dict:
    frame, _name = _find_first_app_frame_and_name([__name__, 'logging'])
    event_dict['file'] = frame.f_code.co_filename
    event_dict['line'] = frame.f_lineno
    event_dict['function'] = frame.f_code.co_name
    return event_dict


def _sl_processor_add_process_context(_, __, event_dict: Dict) -> Dict:
    event_dict['process'] = os.getpid()
    event_dict['thread_name'] = threading.current_thread().name
    return event_dict


_sl_processor_timestamper = structlog.processors.TimeStamper(utc=True)

_sl_foreign_pre_chain = [
    structlog.stdlib.add_log_level,
    _sl_processor_timestamper,
    _sl_processor_add_source_context,
    _sl_processor_add_process_context,
]

_sl_processors = [
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    _sl_processor_timestamper,
    _sl_processor_add_source_context,
    _sl_processor_add_process_context,
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
]

_LEVEL_COLORS = {
    'critical': colorama.Fore.RED,
    'exception': colorama.Fore.RED,
    'error': colorama.Fore.RED,
    'warn': colorama.Fore.YELLOW,
    'warning': colorama.Fore.YELLOW,
    'info': colorama.Fore.GREEN,
    'debug': colorama.Fore.WHITE,
    'notset': colorama.Back.RED,
}


class _FormatRenderer:
    """Render an event dictionary with a str.format() style template."""

    def __init__(self, fmt: str, colors: bool = True) -> None:
        if colors:
            colorama.init()
            self._level_to_color = _LEVEL_COLORS
            self._reset = colorama.Style.RESET_ALL
        else:
            self._level_to_color = {}
            self._reset = ''

        self._vformat = string.Formatter().vformat
        self._fmt = fmt

    def __call__(self, _, __, event_dict: Dict) -> str:
        level = event_dict.get('level', '')
        event_dict['log_color'] = self._level_to_color.get(level, '')
        event_dict['log_color_reset'] = self._reset
        event_dict['level_uc'] = level.upper()
        if 'timestamp' in event_dict:
            # TimeStamper(utc=True) without fmt yields a UNIX timestamp
            event_dict['timestamp_local_ctime'] = datetime.fromtimestamp(event_dict['timestamp']).ctime()

        message = StringIO()
        message.write(self._vformat(self._fmt, [], event_dict))
        for key in ('stack', 'exception'):
            extra = event_dict.pop(key, None)
            if extra is not None:
                message.write('\n' + extra)
        message.write(self._reset)

        return message.getvalue()


def _formatter(processor) -> Dict:
    return {
        '()': structlog.stdlib.ProcessorFormatter,
        'processor': processor,
        'foreign_pre_chain': _sl_foreign_pre_chain,
    }


def init_logging(*,
                 logfile: Optional[str] = None,
                 console_level: Union[str, int] = 'INFO',
                 console_formatter: str = 'console-plain',
                 logfile_formatter: str = 'legacy') -> None:

    formatters = {
        'console-plain': _formatter(_FormatRenderer(colors=False, fmt='{log_color}{level_uc:>8s}: {event:s}')),
        'console-colored': _formatter(_FormatRenderer(colors=True, fmt='{log_color}{level_uc:>8s}: {event:s}')),
        'legacy': _formatter(
            _FormatRenderer(colors=False,
                            fmt='{timestamp_local_ctime} {process:d}/{thread_name:s} {file:s}:{line:d} {level_uc:s} '
                            '{event:s}')),
        'json': _formatter(structlog.processors.JSONRenderer()),
    }

    for formatter in (console_formatter, logfile_formatter):
        if formatter not in formatters:
            raise UsageError('Event formatter {} is unknown.'.format(formatter))

    handlers: Dict[str, Dict] = {
        'console': {
            'level': console_level,
            'class': 'logging.StreamHandler',
            'formatter': console_formatter,
            'stream': 'ext://sys.stderr',
        },
    }
    if logfile is not None:
        if not isinstance(console_level, int):
            console_level = logging.getLevelName(console_level)
        handlers['file'] = {
            'level': min(console_level, logging.INFO),
            'class': 'logging.handlers.WatchedFileHandler',
            'filename': logfile,
            'formatter': logfile_formatter,
        }

    logging.config.dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': formatters,
        'handlers': handlers,
        'loggers': {
            '': {
                'handlers': list(handlers.keys()),
                'level': 'DEBUG',
                'propagate': True,
            },
        },
    })


# Source: https://stackoverflow.com/questions/6234405/logging-uncaught-exceptions-in-python/16993115#16993115
def _handle_exception(exc_type, exc_value, exc_traceback):
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return

    structlog.get_logger().error('Uncaught exception', exc_info=(exc_type, exc_value, exc_traceback))


def install_excepthook() -> None:
    sys.excepthook = _handle_exception


structlog.configure(
    processors=_sl_processors,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

if os.getenv('AESKW_DEBUG') == '1':
    init_logging(console_level='DEBUG')
