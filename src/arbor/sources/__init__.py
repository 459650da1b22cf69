"""Configuration source implementations.

Document sources (files and URLs) produce bytes that the store decodes and
merges. Entry sources (arguments, environment, .env files, Redis) produce
flat ``key=value`` pairs that the store writes path by path.
"""

from .arguments import ArgumentsSource
from .env_file import EnvFileSource
from .environment import EnvironmentSource
from .file import FileResource
from .redis_kv import RedisKeyValueSource
from .url import UrlResource

__all__ = [
    "ArgumentsSource",
    "EnvFileSource",
    "EnvironmentSource",
    "FileResource",
    "RedisKeyValueSource",
    "UrlResource",
]
