"""Loading of ``arbor.yaml`` manifests describing profiles and their sources."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .paths import BasePath, RelativeFrom

logger = logging.getLogger(__name__)

MANIFEST_NAME = "arbor.yaml"

SOURCE_KINDS = ("file", "url", "env", "args", "env_file", "redis", "values")


@dataclass(frozen=True)
class SourceSpec:
    """One source of a profile, in load order.

    Attributes:
        kind: One of ``file``, ``url``, ``env``, ``args``, ``env_file``,
            ``redis`` or ``values``.
        target: Path, URL, URI or raw value depending on ``kind``; None for
            ``env`` and ``args``.
        options: Keyword options for the matching ``ConfigStore.load_*`` call.
    """

    kind: str
    target: Any = None
    options: Dict[str, Any] = field(default_factory=dict)


def parse_relative_from(value: Optional[str], default: RelativeFrom) -> RelativeFrom:
    """Map ``executable``, ``project`` or ``pwd`` to ``BasePath``; anything else is a directory."""
    if value is None:
        return default
    try:
        return BasePath(value)
    except ValueError:
        return Path(value)


class ManifestLoader:
    """Handles locating and parsing ``arbor.yaml``.

    A manifest groups sources into named profiles::

        profiles:
          production:
            sources:
              - file: config/base.json
              - file: config/production.yaml
              - env: true
              - args: true
    """

    def __init__(self, manifest_path: Optional[Union[str, Path]] = None):
        """Initialize manifest loader.

        Args:
            manifest_path: Path to the manifest. If None, ``arbor.yaml`` is
                looked up in the working directory and its parents.
        """
        self.manifest_path = self._find_manifest(manifest_path)
        self._manifest: Optional[Dict[str, Any]] = None

    def _find_manifest(self, manifest_path: Optional[Union[str, Path]]) -> Optional[Path]:
        if manifest_path is not None:
            path = Path(manifest_path)
            return path if path.exists() else None

        current = Path.cwd()
        while True:
            candidate = current / MANIFEST_NAME
            if candidate.exists():
                return candidate
            if current == current.parent:
                return None
            current = current.parent

    @property
    def base_dir(self) -> Optional[Path]:
        """Directory relative manifest file paths are resolved against."""
        if self.manifest_path is None:
            return None
        return self.manifest_path.resolve().parent

    def load(self) -> Dict[str, Any]:
        """Load the manifest.

        Returns:
            Parsed manifest, or an empty dict if there is no manifest or it
            cannot be read.

        Raises:
            ValueError: If the manifest is not valid YAML or not a mapping.
        """
        if self.manifest_path is None:
            return {}
        if self._manifest is not None:
            return self._manifest

        try:
            with open(self.manifest_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {MANIFEST_NAME} at {self.manifest_path}: {e}") from e
        except OSError as e:
            logger.warning("Could not read %s: %s", self.manifest_path, e)
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {MANIFEST_NAME} at {self.manifest_path}: not a mapping")
        self._manifest = data
        return data

    def get_profile_config(self, profile: str) -> Optional[Dict[str, Any]]:
        profiles = self.load().get("profiles") or {}
        return profiles.get(profile)

    def get_sources(self, profile: str) -> List[Dict[str, Any]]:
        profile_config = self.get_profile_config(profile)
        if not profile_config:
            return []
        return list(profile_config.get("sources") or [])

    def parse_source(self, source_config: Dict[str, Any]) -> SourceSpec:
        """Turn one manifest entry into a :class:`SourceSpec`.

        Raises:
            ValueError: If the entry names no known source kind.
        """
        if not isinstance(source_config, dict):
            raise ValueError(f"Source entry must be a mapping, got {source_config!r}")
        base_dir = self.base_dir
        file_default: RelativeFrom = base_dir if base_dir is not None else BasePath.PWD

        if "file" in source_config:
            options: Dict[str, Any] = {
                "relative_from": parse_relative_from(
                    source_config.get("relative_from"), file_default
                )
            }
            if "format" in source_config:
                options["format"] = source_config["format"]
            return SourceSpec("file", source_config["file"], options)

        if "url" in source_config:
            options = {}
            if "format" in source_config:
                options["format"] = source_config["format"]
            return SourceSpec("url", source_config["url"], options)

        if "env_file" in source_config:
            return SourceSpec(
                "env_file",
                source_config["env_file"],
                {
                    "relative_from": parse_relative_from(
                        source_config.get("relative_from"), file_default
                    )
                },
            )

        if "redis" in source_config:
            options = {}
            for key in ("prefix", "key_separator"):
                if key in source_config:
                    options[key] = source_config[key]
            return SourceSpec("redis", source_config["redis"], options)

        if "values" in source_config:
            return SourceSpec("values", source_config["values"])

        if source_config.get("env"):
            return SourceSpec("env")

        if source_config.get("args"):
            return SourceSpec("args")

        raise ValueError(
            f"Source entry must have one of {', '.join(SOURCE_KINDS)}: {source_config!r}"
        )
