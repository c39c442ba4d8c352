# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Centralised logging configuration.

Levels, handlers and format live in etc/logging.conf.  The file carries a
%(log_file)s placeholder which is replaced with the absolute path of
log/app.log before the text is handed to fileConfig.

Usage:
    from core.logger import logger
"""

import configparser
import logging
import logging.config
from pathlib import Path

_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_LOG_DIR = _PROJECT_ROOT / "log"
_LOG_FILE = _LOG_DIR / "app.log"
_LOGGING_CONF = _PROJECT_ROOT / "etc" / "logging.conf"


def _configure() -> None:
    _LOG_DIR.mkdir(exist_ok=True)

    raw = _LOGGING_CONF.read_text(encoding="utf-8")
    raw = raw.replace("%(log_file)s", _LOG_FILE.as_posix())

    # Raw parser: the format strings contain %(asctime)s and friends
    parser = configparser.RawConfigParser()
    parser.read_string(raw)
    logging.config.fileConfig(parser, disable_existing_loggers=False)


_configure()

logger = logging.getLogger("syncvault")
