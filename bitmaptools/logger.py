#!/usr/bin/python

# Bitmap Tools, a module and set of tools for decoding bitmap images
# Copyright (C) 2007-2016  Brian Langenberger

# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.

# You should have received a copy of the GNU General Public License
# along with this program; if not, write to the Free Software
# Foundation, Inc., 51 Franklin Street, Fifth Floor, Boston, MA  02110-1301  USA

import logging

ERROR = logging.ERROR
WARNING = logging.WARNING
MESSAGE = logging.INFO
DEBUG = logging.DEBUG

reverseNames = {u'ERROR': ERROR,
                u'WARNING': WARNING,
                u'INFO': MESSAGE,
                u'DEBUG': DEBUG}

LOGGER_NAME = 'bitmaptools'

# keep a record of this so we can remove/reset it on re-initialization
consoleHandler = None


def init_logging(console_logging=True, level=None):
    """installs a console handler on the bitmaptools logger

    level is one of the level constants, or None to use
    the [Logging] level from the configuration file"""

    global consoleHandler

    if level is None:
        from bitmaptools import LOG_LEVEL
        level = reverseNames.get(LOG_LEVEL.upper(), WARNING)

    bt_logger = logging.getLogger(LOGGER_NAME)

    if consoleHandler is not None:
        bt_logger.removeHandler(consoleHandler)
        consoleHandler = None

    if console_logging:
        # a Handler which writes messages to sys.stderr
        consoleHandler = logging.StreamHandler()
        consoleHandler.setLevel(level)

        # set a format which is simpler for console use
        consoleHandler.setFormatter(
            logging.Formatter('%(asctime)s %(levelname)s::%(message)s',
                              '%H:%M:%S'))

        bt_logger.addHandler(consoleHandler)

    bt_logger.setLevel(level)


def log(to_log, log_level=MESSAGE):
    bt_logger = logging.getLogger(LOGGER_NAME)

    if log_level == DEBUG:
        bt_logger.debug(to_log)
    elif log_level == MESSAGE:
        bt_logger.info(to_log)
    elif log_level == WARNING:
        bt_logger.warning(to_log)
    elif log_level == ERROR:
        bt_logger.error(to_log)
    else:
        bt_logger.log(log_level, to_log)
