"""Named, ordered sets of configuration sources."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from .manifest import ManifestLoader, SourceSpec
from .paths import BasePath, RelativeFrom
from .store import ConfigStore

logger = logging.getLogger(__name__)


class Profile:
    """A named list of sources that builds a :class:`ConfigStore`.

    Sources declared for the profile in ``arbor.yaml`` come first, followed
    by sources registered in code, and are loaded in that order so later
    sources override earlier ones.
    """

    def __init__(
        self,
        name: str,
        manifest_path: Optional[Union[str, Path]] = None,
        store_options: Optional[Dict[str, Any]] = None,
    ):
        """Initialize a Profile.

        Args:
            name: Profile name (e.g. "production", "development").
            manifest_path: Optional path to ``arbor.yaml``. If not provided,
                it is searched for in the working directory and its parents.
            store_options: Keyword arguments for :class:`ConfigStore`. They
                override the ``options`` declared for the profile in the
                manifest.
        """
        self.name = name
        self._registered: List[SourceSpec] = []
        self._manifest = ManifestLoader(manifest_path)
        self.store_options: Dict[str, Any] = {}
        self._load_from_manifest()
        self.store_options.update(store_options or {})

    def _load_from_manifest(self) -> None:
        profile_config = self._manifest.get_profile_config(self.name) or {}
        self.store_options.update(profile_config.get("options") or {})
        for source_config in self._manifest.get_sources(self.name):
            try:
                self._registered.append(self._manifest.parse_source(source_config))
            except ValueError as e:
                logger.warning(
                    "Skipping source of profile '%s' in %s: %s",
                    self.name,
                    self._manifest.manifest_path,
                    e,
                )

    @property
    def manifest_path(self) -> Optional[Path]:
        return self._manifest.manifest_path

    @property
    def sources(self) -> List[SourceSpec]:
        return list(self._registered)

    def register(self, spec: SourceSpec) -> "Profile":
        self._registered.append(spec)
        return self

    def register_values(self, raw: Any) -> "Profile":
        return self.register(SourceSpec("values", raw))

    def register_file(
        self,
        path: Union[str, Path],
        relative_from: RelativeFrom = BasePath.EXECUTABLE,
        format: Optional[str] = None,
    ) -> "Profile":
        options: Dict[str, Any] = {"relative_from": relative_from}
        if format is not None:
            options["format"] = format
        return self.register(SourceSpec("file", path, options))

    def register_url(self, url: str, format: Optional[str] = None) -> "Profile":
        options = {"format": format} if format is not None else {}
        return self.register(SourceSpec("url", url, options))

    def register_env_file(
        self, path: Union[str, Path], relative_from: RelativeFrom = BasePath.PWD
    ) -> "Profile":
        return self.register(SourceSpec("env_file", path, {"relative_from": relative_from}))

    def register_environment(self, environ: Optional[Mapping[str, str]] = None) -> "Profile":
        return self.register(SourceSpec("env", environ))

    def register_arguments(self, argv: Optional[Sequence[str]] = None) -> "Profile":
        return self.register(SourceSpec("args", argv))

    def register_redis(
        self, uri: str, prefix: str = "", key_separator: str = ":"
    ) -> "Profile":
        return self.register(
            SourceSpec("redis", uri, {"prefix": prefix, "key_separator": key_separator})
        )

    def build(self, **overrides: Any) -> ConfigStore:
        """Create a store and load every registered source into it, in order.

        Args:
            **overrides: Extra :class:`ConfigStore` keyword arguments, e.g. a
                ``http_client``.

        Raises:
            ResourceError: If a source cannot be read.
            DecodeError: If a document cannot be decoded.
        """
        store = ConfigStore(**{**self.store_options, **overrides})
        for spec in self._registered:
            apply_source(store, spec)
        return store


def apply_source(store: ConfigStore, spec: SourceSpec) -> ConfigStore:
    """Run the ``load_*`` call of ``store`` matching ``spec.kind``."""
    if spec.kind == "values":
        return store.load(spec.target)
    if spec.kind == "file":
        return store.load_file(spec.target, **spec.options)
    if spec.kind == "url":
        return store.load_url(spec.target, **spec.options)
    if spec.kind == "env_file":
        return store.load_env_file(spec.target, **spec.options)
    if spec.kind == "redis":
        return store.load_redis(spec.target, **spec.options)
    if spec.kind == "env":
        return store.load_environment(spec.target)
    if spec.kind == "args":
        return store.load_arguments(spec.target)
    raise ValueError(f"Unsupported source kind: {spec.kind}")
