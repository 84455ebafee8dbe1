'''Environment accessors for the blog server.

Values are read on each call so a `.env` file loaded by the app factory (or a
test patching `os.environ`) is honoured.
'''
import logging
import os
from typing import Optional

DEFAULT_PORT : int = 3000
DEFAULT_HOST : str = '0.0.0.0'
DEFAULT_DB_FILE : str = 'blog.db'
DEFAULT_LOG_LEVEL : str = 'INFO'
MEMORY_DB : str = ':memory:'


def _raw_env(name:str, default:Optional[str]=None) -> Optional[str]:
    value : Optional[str] = os.getenv(name)
    return value if value else default


def port() -> int:
    raw : str = _raw_env('PORT', str(DEFAULT_PORT))
    try:
        return int(raw, 10)
    except ValueError:
        raise ValueError(f'PORT must be an integer, got {raw!r}') from None


def host() -> str:
    return _raw_env('HOST', DEFAULT_HOST)


def db_file() -> str:
    return _raw_env('DB_FILE', DEFAULT_DB_FILE)


# pino-style level names
LEVEL_ALIASES : dict[str, str] = {
    'TRACE': 'DEBUG',
    'WARN': 'WARNING',
    'FATAL': 'CRITICAL',
    'SILENT': 'CRITICAL',
}


def log_level_name() -> str:
    '''Return a Python logging level name; unknown names fall back to INFO.'''
    name : str = _raw_env('LOG_LEVEL', DEFAULT_LOG_LEVEL).upper()
    name = LEVEL_ALIASES.get(name, name)
    if not isinstance(getattr(logging, name, None), int):
        return DEFAULT_LOG_LEVEL
    return name


def secret_key() -> Optional[str]:
    return _raw_env('SECRET_KEY')


def database_uri(db_path:str, instance_path:str) -> str:
    '''Map a DB_FILE value to a SQLAlchemy URI; relative paths land in the instance folder.'''
    if db_path == MEMORY_DB:
        return 'sqlite://'
    if not os.path.isabs(db_path):
        os.makedirs(instance_path, exist_ok=True)
        db_path = os.path.join(instance_path, db_path)
    return f'sqlite:///{db_path}'
