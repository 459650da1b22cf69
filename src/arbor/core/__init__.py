from .errors import ArborError, DecodeError, ResourceError
from .node import ConfigNode, NodeKind
from .path import PathAddress
from .paths import BasePath, BasePathResolver, DefaultBasePathResolver
from .profile import Profile
from .store import ConfigStore

__all__ = [
    "ArborError",
    "BasePath",
    "BasePathResolver",
    "ConfigNode",
    "ConfigStore",
    "DecodeError",
    "DefaultBasePathResolver",
    "NodeKind",
    "PathAddress",
    "Profile",
    "ResourceError",
]
