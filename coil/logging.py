"""
Coil logging.

Two channels:

- Console messages per module, filtered by level:

      from coil.logging import get_logger

      log = get_logger('chain')
      log.debug("Inserted ball at slot %d", slot)

- Structured gameplay records (matches, insertions, run results) handed to
  a sink registered for the module, usually a JSONL file per module:

      from coil.logging import emit_record

      emit_record('chain', {'event': 'match', 'size': 3, 'elapsed': 12.5})

Environment:
    COIL_LOG_LEVEL=DEBUG              default console level
    COIL_LOG_<MODULE>=DEBUG           console level for one module
    COIL_LOG_FORMULAS=1               echo sandboxed formula compilation
    COIL_LOG_DIR=/tmp/coil            directory for JSONL record files
    COIL_LOGGING_<MODULE>_ENABLED=1   write <module> records to a file
    COIL_LOGGING_<MODULE>_DIR=...     per-module record directory
"""

import json
import os
import sys
import time
from abc import ABC, abstractmethod
from enum import IntEnum
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, TextIO


class LogLevel(IntEnum):
    """Console levels, numbered like the standard logging module."""
    TRACE = 5
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50
    OFF = 100


_LEVEL_NAMES = {
    'TRACE': LogLevel.TRACE,
    'DEBUG': LogLevel.DEBUG,
    'INFO': LogLevel.INFO,
    'WARNING': LogLevel.WARNING,
    'WARN': LogLevel.WARNING,
    'ERROR': LogLevel.ERROR,
    'CRITICAL': LogLevel.CRITICAL,
    'OFF': LogLevel.OFF,
}

# COIL_LOG_* names that are not module levels
_RESERVED = ('COIL_LOG_LEVEL', 'COIL_LOG_FORMULAS', 'COIL_LOG_DIR')

_config: Dict[str, Any] = {
    'default_level': LogLevel.INFO,
    'module_levels': {},     # module -> LogLevel
    'formulas': False,       # echo formula compile/reject lines
    'log_dir': None,         # record directory override
    'modules': {},           # module -> {'enabled': bool, 'dir': str, ...}
}


def _parse_level(name: str) -> LogLevel:
    return _LEVEL_NAMES.get(name.strip().upper(), LogLevel.INFO)


def _parse_flag(value: str) -> Any:
    """Env values: booleans and numbers are converted, anything else kept."""
    lowered = value.strip().lower()
    if lowered in ('1', 'true', 'yes', 'on'):
        return True
    if lowered in ('0', 'false', 'no', 'off'):
        return False
    for convert in (int, float):
        try:
            return convert(value)
        except ValueError:
            continue
    return value


def _read_environment() -> None:
    env = os.environ
    if 'COIL_LOG_LEVEL' in env:
        _config['default_level'] = _parse_level(env['COIL_LOG_LEVEL'])
    if 'COIL_LOG_DIR' in env:
        _config['log_dir'] = env['COIL_LOG_DIR']
    _config['formulas'] = env.get('COIL_LOG_FORMULAS', '').lower() in ('1', 'true', 'yes')

    for key, value in env.items():
        if key.startswith('COIL_LOG_') and key not in _RESERVED:
            _config['module_levels'][key[len('COIL_LOG_'):].lower()] = _parse_level(value)
        elif key.startswith('COIL_LOGGING_'):
            module, _, setting = key[len('COIL_LOGGING_'):].lower().partition('_')
            if module and setting:
                _config['modules'].setdefault(module, {})[setting] = _parse_flag(value)


_read_environment()


def configure_logging(
    level: str = 'INFO',
    modules: Optional[Dict[str, str]] = None,
    formulas: bool = False,
) -> None:
    """Set console levels in code.

    Args:
        level: Default level for every module
        modules: Per-module levels, e.g. {'chain': 'DEBUG'}
        formulas: Echo sandboxed formula compilation
    """
    _config['default_level'] = _parse_level(level)
    for module, module_level in (modules or {}).items():
        _config['module_levels'][module.lower()] = _parse_level(module_level)
    _config['formulas'] = formulas


def get_module_config(module: str) -> Dict[str, Any]:
    """Record settings for a module (from COIL_LOGGING_<MODULE>_*)."""
    return _config['modules'].get(module.lower(), {})


def get_log_dir() -> Path:
    """Directory for record files: COIL_LOG_DIR, else the user data dir."""
    if _config['log_dir']:
        return Path(_config['log_dir']).expanduser()
    if sys.platform == 'darwin':
        base = Path.home() / 'Library' / 'Application Support' / 'Coil'
    elif sys.platform == 'win32':
        base = Path(os.environ.get('APPDATA', str(Path.home()))) / 'Coil'
    else:
        base = Path(os.environ.get('XDG_DATA_HOME', str(Path.home() / '.local' / 'share'))) / 'coil'
    return base / 'logs'


# =============================================================================
# Console
# =============================================================================

class CoilLogger:
    """Console logger bound to one module name.

    Messages use %-style arguments, formatted only when the level is enabled.
    """

    def __init__(self, module: str):
        self.module = module

    @property
    def level(self) -> LogLevel:
        return _config['module_levels'].get(self.module.lower(), _config['default_level'])

    def is_enabled_for(self, level: LogLevel) -> bool:
        return level >= self.level

    def _write(self, level: LogLevel, label: str, msg: str, args: tuple) -> None:
        if not self.is_enabled_for(level):
            return
        if args:
            try:
                msg = msg % args
            except (TypeError, ValueError):
                msg = f"{msg} {args}"
        print(f"[{self.module}] {label}: {msg}")

    def trace(self, msg: str, *args) -> None:
        """Per-frame detail, below DEBUG."""
        self._write(LogLevel.TRACE, 'TRACE', msg, args)

    def debug(self, msg: str, *args) -> None:
        self._write(LogLevel.DEBUG, 'DEBUG', msg, args)

    def info(self, msg: str, *args) -> None:
        self._write(LogLevel.INFO, 'INFO', msg, args)

    def warning(self, msg: str, *args) -> None:
        self._write(LogLevel.WARNING, 'WARN', msg, args)

    def error(self, msg: str, *args) -> None:
        self._write(LogLevel.ERROR, 'ERROR', msg, args)

    def critical(self, msg: str, *args) -> None:
        self._write(LogLevel.CRITICAL, 'CRIT', msg, args)

    def formula(self, name: str, source: str, action: str = 'compile') -> None:
        """Echo a formula being compiled or rejected (COIL_LOG_FORMULAS=1)."""
        if _config['formulas']:
            self._write(LogLevel.DEBUG, 'LUA', "%s %s: %s", (action, name, source))


@lru_cache(maxsize=64)
def get_logger(module: str) -> CoilLogger:
    """Logger for a module. The same instance is returned for the same name."""
    return CoilLogger(module)


# =============================================================================
# Structured records
# =============================================================================

class LogSink(ABC):
    """Destination for structured records."""

    @abstractmethod
    def emit(self, module: str, record: Dict[str, Any]) -> None:
        """Write one JSON-serializable record."""

    @abstractmethod
    def flush(self) -> None:
        pass

    @abstractmethod
    def close(self) -> None:
        pass

    def __enter__(self) -> 'LogSink':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class FileSink(LogSink):
    """One JSON Lines file per module: <session>_<module>.jsonl.

    Each file opens with a header record and is closed with a footer record.
    Records without a `wall_time` get one.

    Args:
        log_dir: Target directory (default: get_log_dir())
        session_name: File name prefix (default: start timestamp)
    """

    def __init__(self, log_dir: Optional[str] = None, session_name: Optional[str] = None):
        self._log_dir = Path(log_dir) if log_dir else None
        self._session_name = session_name or time.strftime("%Y%m%d_%H%M%S")
        self._files: Dict[str, TextIO] = {}

    def _path_for(self, module: str) -> Path:
        if self._log_dir is None:
            self._log_dir = get_log_dir()
        return self._log_dir / f"{self._session_name}_{module}.jsonl"

    def _open(self, module: str) -> TextIO:
        f = self._files.get(module)
        if f is None:
            path = self._path_for(module)
            path.parent.mkdir(parents=True, exist_ok=True)
            f = open(path, 'a')
            self._files[module] = f
            self._write(f, {'type': 'header', 'module': module,
                            'session_name': self._session_name, 'start_time': time.time()})
        return f

    @staticmethod
    def _write(f: TextIO, record: Dict[str, Any]) -> None:
        f.write(json.dumps(record) + "\n")

    def emit(self, module: str, record: Dict[str, Any]) -> None:
        if 'wall_time' not in record:
            record = {'wall_time': time.time(), **record}
        self._write(self._open(module), record)

    def flush(self) -> None:
        for f in self._files.values():
            f.flush()

    def close(self) -> None:
        for module, f in self._files.items():
            self._write(f, {'type': 'footer', 'module': module, 'end_time': time.time()})
            f.close()
        self._files.clear()

    @property
    def log_paths(self) -> Dict[str, Path]:
        """Files opened so far, by module."""
        return {module: self._path_for(module) for module in self._files}


class NullSink(LogSink):
    """Discards every record."""

    def emit(self, module: str, record: Dict[str, Any]) -> None:
        pass

    def flush(self) -> None:
        pass

    def close(self) -> None:
        pass


_sinks: Dict[str, LogSink] = {}
_default_sink: Optional[LogSink] = None


def register_sink(module: str, sink: LogSink) -> None:
    _sinks[module] = sink


def set_default_sink(sink: Optional[LogSink]) -> None:
    """Sink for modules without one of their own."""
    global _default_sink
    _default_sink = sink


def get_sink(module: str) -> Optional[LogSink]:
    return _sinks.get(module, _default_sink)


def emit_record(module: str, record: Dict[str, Any]) -> bool:
    """Send a record to the module's sink.

    Returns:
        False when no sink is registered (the record is dropped)
    """
    sink = get_sink(module)
    if sink is None:
        return False
    sink.emit(module, record)
    return True


def close_all_sinks() -> None:
    """Close and forget every registered sink, including the default."""
    global _default_sink
    for sink in _sinks.values():
        sink.close()
    _sinks.clear()
    if _default_sink is not None:
        _default_sink.close()
        _default_sink = None


def create_sink_for_environment(module: str, session_name: Optional[str] = None) -> LogSink:
    """FileSink when COIL_LOGGING_<MODULE>_ENABLED is set, otherwise NullSink."""
    settings = get_module_config(module)
    if not settings.get('enabled', False):
        return NullSink()
    return FileSink(log_dir=settings.get('dir'), session_name=session_name)
