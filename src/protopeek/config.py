import logging
import os

from dotenv import load_dotenv

load_dotenv()

# bad values are collected here and reported by validate()
_problems = []


def _int_setting(name, default):
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        _problems.append(f"{name} must be an integer, got {raw!r}")
        return default
    if value < 0:
        _problems.append(f"{name} must not be negative, got {value}")
        return default
    return value


LOG_FORMAT = '[%(asctime)s] %(levelname)s %(name)s: %(message)s'
LOG_LEVEL = os.getenv("PROTOPEEK_LOG_LEVEL", "WARNING").upper()
LOG_FILE = os.getenv("PROTOPEEK_LOG_FILE")

# "skip" drops group markers like the original dumper, "nest" indents group contents
GROUP_MODES = ("skip", "nest")
GROUP_MODE = os.getenv("PROTOPEEK_GROUPS", "skip").lower()

MAX_DEPTH = _int_setting("PROTOPEEK_MAX_DEPTH", 100)

SERVER_HOST = os.getenv("PROTOPEEK_HOST", "127.0.0.1")
SERVER_PORT = _int_setting("PROTOPEEK_PORT", 8000)
MAX_UPLOAD = _int_setting("PROTOPEEK_MAX_UPLOAD", 16 * 1024 * 1024)


class ConfigError(ValueError):
    pass


def validate():
    """Raise ConfigError listing every bad PROTOPEEK_* setting."""
    problems = list(_problems)
    if GROUP_MODE not in GROUP_MODES:
        problems.append(f"PROTOPEEK_GROUPS must be one of {', '.join(GROUP_MODES)}, got {GROUP_MODE!r}")
    if not isinstance(logging.getLevelName(LOG_LEVEL), int):
        problems.append(f"PROTOPEEK_LOG_LEVEL is not a logging level: {LOG_LEVEL!r}")
    if problems:
        raise ConfigError("; ".join(problems))


def setup_logging(level=None):
    """Configure the root logger once, to a file when PROTOPEEK_LOG_FILE is set."""
    level = level or LOG_LEVEL
    if LOG_FILE:
        logging.basicConfig(filename=LOG_FILE, format=LOG_FORMAT, level=level)
    else:
        logging.basicConfig(format=LOG_FORMAT, level=level)


def check_group_mode(mode):
    if mode not in GROUP_MODES:
        raise ValueError(f"Unsupported group mode: {mode} (expected one of {', '.join(GROUP_MODES)})")
    return mode
