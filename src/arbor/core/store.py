"""The configuration store aggregating every source into one tree."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Union

import httpx

from ..deserializers.registry import Deserializer, DeserializerRegistry
from .errors import DecodeError
from .node import ConfigNode
from .path import DEFAULT_SEPARATOR, PathAddress
from .paths import BasePath, BasePathResolver, DefaultBasePathResolver, RelativeFrom, resolve_file
from .source import EntrySource, Resource

logger = logging.getLogger(__name__)


class ConfigStore:
    """Aggregate configuration from many sources into a single tree.

    Every ``load*`` call merges its data on top of what was loaded before,
    so the most recent source wins. Nested mappings are merged key by key;
    any other value (scalars, lists) is replaced as a whole.

    Values are addressed with paths such as ``database:replicas:0:host``.
    Missing values read as ``None`` and writes to impossible paths are
    ignored; neither raises.

    Example::

        store = ConfigStore()
        store.load({"db": {"host": "localhost"}}).load({"db": {"port": 5432}})
        store.get("db")  # {"host": "localhost", "port": 5432}
    """

    def __init__(
        self,
        *,
        argument_prefix: str = "--",
        argument_separator: str = ".",
        environment_separator: str = "__",
        parse_string_to_object: bool = True,
        separator: str = DEFAULT_SEPARATOR,
        registry: Optional[DeserializerRegistry] = None,
        resolver: Optional[BasePathResolver] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        """Initialize ConfigStore.

        Args:
            argument_prefix: Prefix marking a command-line argument as a
                ``path=value`` pair.
            argument_separator: Path separator inside command-line arguments.
            environment_separator: Path separator inside environment variable
                names, ``.env`` keys included.
            parse_string_to_object: Decode argument and environment values
                into lists or mappings when they parse as such.
            separator: Path separator of the tree itself.
            registry: Deserializers for documents and string values. Defaults
                to JSON, property lists and YAML.
            resolver: Resolver for ``BasePath`` members used by file loads.
            http_client: Client used for ``http(s)://`` loads.
        """
        if not separator:
            raise ValueError("Path separator must be a non-empty string")
        self.argument_prefix = argument_prefix
        self.argument_separator = argument_separator
        self.environment_separator = environment_separator
        self.parse_string_to_object = parse_string_to_object
        self.separator = separator
        self.registry = registry if registry is not None else DeserializerRegistry.default()
        self.resolver: BasePathResolver = resolver or DefaultBasePathResolver()
        self.http_client = http_client
        self._root = ConfigNode.mapping()

    # ---- loading ----
    def load(self, raw: Any) -> "ConfigStore":
        """Merge a raw value (dict, list or scalar) at the root.

        ``None`` is ignored.
        """
        logger.debug("Loading object of type %s", type(raw).__name__)
        self._root.merge(ConfigNode.from_raw(raw))
        return self

    def load_data(self, data: bytes, format: Optional[str] = None) -> "ConfigStore":
        """Decode ``data`` and merge the result at the root.

        Args:
            data: Raw document bytes.
            format: Deserializer name to force, e.g. ``"json"``. When omitted
                every registered deserializer is tried in order.

        Raises:
            DecodeError: If the data cannot be decoded. The store is unchanged.
        """
        return self.load(self.registry.decode(data, format))

    def load_resource(self, resource: Resource, format: Optional[str] = None) -> "ConfigStore":
        """Fetch, decode and merge a document source.

        The deserializer is the one named by ``format`` if given, otherwise
        the one matching the payload's format hint, otherwise the first
        registered deserializer that accepts the data.

        Raises:
            ResourceError: If the resource cannot be read.
            DecodeError: If the content cannot be decoded.
        """
        logger.debug("Loading %s", resource.name)
        payload = resource.fetch()
        try:
            if format is not None:
                raw = self.registry.decode(payload.data, format)
            else:
                deserializer = self.registry.for_hint(payload.format_hint)
                if deserializer is not None:
                    raw = deserializer.deserialize(payload.data)
                else:
                    raw = self.registry.decode(payload.data)
        except DecodeError as e:
            raise DecodeError(f"Unable to decode {payload.origin}: {e}") from e
        return self.load(raw)

    def load_file(
        self,
        path: Union[str, Path],
        relative_from: RelativeFrom = BasePath.EXECUTABLE,
        format: Optional[str] = None,
    ) -> "ConfigStore":
        """Load a configuration file.

        Args:
            path: Absolute path, or path relative to ``relative_from``.
            relative_from: A ``BasePath`` member or a custom directory.
            format: Deserializer name to force; otherwise chosen by extension.
        """
        from ..sources.file import FileResource

        resolved = resolve_file(path, relative_from, self.resolver)
        return self.load_resource(FileResource(resolved), format)

    def load_url(self, url: str, format: Optional[str] = None) -> "ConfigStore":
        """Load a configuration document from a ``file://`` or ``http(s)://`` URL."""
        from ..sources.url import UrlResource

        return self.load_resource(UrlResource(url, client=self.http_client), format)

    def load_entries(self, source: EntrySource) -> "ConfigStore":
        """Write every ``key=value`` entry of a flat source into the tree.

        Keys are turned into paths by replacing the source separator with the
        tree separator. Each value is written with :meth:`set`, replacing
        whatever was at that path. All entries are read before the first
        write, so a failing source leaves the store unchanged.
        """
        logger.debug("Loading entries from %s", source.name)
        entries = list(source.entries())
        for entry in entries:
            path = entry.key
            if source.separator:
                path = path.replace(source.separator, self.separator)
            value: Any = entry.value
            if self.parse_string_to_object:
                value = self.registry.decode_string(entry.value, source.deserializer)
            self.set(path, value)
        return self

    def load_arguments(self, argv: Optional[Sequence[str]] = None) -> "ConfigStore":
        """Load ``--path.to.key=value`` arguments, ``sys.argv[1:]`` by default."""
        from ..sources.arguments import ArgumentsSource

        return self.load_entries(
            ArgumentsSource(argv, prefix=self.argument_prefix, separator=self.argument_separator)
        )

    def load_environment(self, environ: Optional[Mapping[str, str]] = None) -> "ConfigStore":
        """Load ``PATH__TO__KEY=value`` variables, ``os.environ`` by default."""
        from ..sources.environment import EnvironmentSource

        return self.load_entries(
            EnvironmentSource(environ, separator=self.environment_separator)
        )

    def load_env_file(
        self,
        path: Union[str, Path],
        relative_from: RelativeFrom = BasePath.PWD,
    ) -> "ConfigStore":
        """Load a ``.env`` file as if its entries were environment variables."""
        from ..sources.env_file import EnvFileSource

        resolved = resolve_file(path, relative_from, self.resolver)
        return self.load_entries(EnvFileSource(resolved, separator=self.environment_separator))

    def load_redis(
        self,
        uri: str,
        prefix: str = "",
        key_separator: str = ":",
        client: Optional[Any] = None,
    ) -> "ConfigStore":
        """Load string keys starting with ``prefix`` from a Redis database."""
        from ..sources.redis_kv import RedisKeyValueSource

        return self.load_entries(
            RedisKeyValueSource(uri, prefix=prefix, separator=key_separator, client=client)
        )

    def use(self, deserializer: Deserializer) -> "ConfigStore":
        """Register an additional deserializer, replacing one of the same name."""
        self.registry.use(deserializer)
        return self

    # ---- access ----
    def _address(self, path: str) -> PathAddress:
        return PathAddress.parse(path, self.separator)

    def get(self, path: str, default: Optional[Any] = None) -> Any:
        """Return a copy of the value at ``path``, or ``default`` if there is none.

        Partial paths return whole sections as plain dicts and lists.
        """
        node = self._address(path).resolve(self._root)
        if node is None or node.is_empty:
            return default
        return node.raw_value

    def set(self, path: str, value: Any) -> None:
        """Write ``value`` at ``path``, creating intermediate mappings.

        Writing ``None`` does nothing. A list can be extended by writing to
        the index equal to its length; other out of range indexes are ignored.
        """
        self._address(path).assign(self._root, ConfigNode.from_raw(value))

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, str):
            return False
        return self.get(path) is not None

    def get_configs(self) -> Any:
        """Return the whole tree as plain dicts, lists and scalars."""
        return self._root.raw_value
