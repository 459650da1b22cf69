"""arbor - hierarchical configuration aggregation.

Load configuration from raw objects, files, URLs, command-line arguments,
environment variables, .env files and Redis into one tree, with later
sources overriding earlier ones, and address values with ``a:b:0`` paths.
"""

from .core.errors import ArborError, DecodeError, ResourceError
from .core.node import ConfigNode, NodeKind
from .core.path import PathAddress
from .core.paths import BasePath
from .core.profile import Profile
from .core.store import ConfigStore
from .deserializers import Deserializer, DeserializerRegistry

__all__ = [
    "ArborError",
    "BasePath",
    "ConfigNode",
    "ConfigStore",
    "DecodeError",
    "Deserializer",
    "DeserializerRegistry",
    "NodeKind",
    "PathAddress",
    "Profile",
    "ResourceError",
]
