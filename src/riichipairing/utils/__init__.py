"""Logging utilities."""

# Riichi Pairing
# Copyright (C) 2025  Riichi Pairing developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import logging
import os
import random
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Optional, Union

from riichipairing.constants import LOG_DIR_ENV_VAR, LOG_FILE_NAME

# the logger format used
LOG_FMT = "LVL: %(levelname)s | FILE PATH: %(pathname)s | FUN: %(funcName)s | msg: %(message)s | ln#:%(lineno)d"


# --- Logging Setup ---
def setup_logger(logger_name: str) -> logging.Logger:
    """Set up logger for a python module.

    Sets up a console handler and, when ``RIICHIPAIRING_LOG_DIR`` is set,
    a rotating file handler in that folder.

    Parameters
    ----------
    logger_name : str
        The name for the logger, __name__ is idiomatic

    Returns
    -------
    logging.Logger
        the created logger
    """
    lgr = logging.getLogger(name=logger_name)
    lgr.setLevel(logging.INFO)
    # Remove any existing handlers on this logger to avoid duplicates
    for _h in list(lgr.handlers):
        lgr.removeHandler(_h)
    log_formatter = logging.Formatter(LOG_FMT)

    file_handler = None
    log_folder = os.environ.get(LOG_DIR_ENV_VAR)
    if log_folder:
        try:
            os.makedirs(log_folder, exist_ok=True)
            # rotate at 5 MB, keep five files
            file_handler = RotatingFileHandler(
                os.path.join(log_folder, LOG_FILE_NAME),
                maxBytes=5 * 1024 * 1024,
                backupCount=5,
                encoding="utf-8",
            )
            file_handler.setFormatter(log_formatter)
        except OSError as e:
            print(f"Warning: could not open log file in {log_folder}: {e}")
            file_handler = None

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(log_formatter)
    console_handler.setLevel(logging.INFO)
    lgr.addHandler(console_handler)
    if file_handler:
        lgr.addHandler(file_handler)
    lgr.debug("logger %s initialized", logger_name)
    return lgr


def make_rng(seed: Optional[Union[int, random.Random]] = None) -> random.Random:
    """Return a random source.

    An existing ``random.Random`` is passed through so several components can
    share one seeded stream.
    """
    if isinstance(seed, random.Random):
        return seed
    return random.Random(seed) if seed is not None else random.Random()


def utc_now() -> datetime:
    """Default clock."""
    return datetime.now(timezone.utc)
