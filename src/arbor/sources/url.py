from __future__ import annotations

from pathlib import PurePosixPath
from typing import Optional
from urllib.parse import unquote, urlsplit
from urllib.request import url2pathname

import httpx

from ..core.errors import ResourceError
from ..core.source import Resource
from ..core.types import Payload
from .file import FileResource

DEFAULT_TIMEOUT = 20.0


class UrlResource(Resource):
    """A configuration document addressed by URL.

    ``file://`` URLs are read from disk; ``http://`` and ``https://`` URLs are
    fetched with httpx. The response ``Content-Type`` is used as the format
    hint, falling back to the extension of the URL path.
    """

    def __init__(
        self,
        url: str,
        name: Optional[str] = None,
        client: Optional[httpx.Client] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        parts = urlsplit(url)
        if not parts.scheme:
            raise ValueError(f"URL must include a scheme such as file:// or https://: {url}")
        if parts.scheme not in {"file", "http", "https"}:
            raise ValueError(f"Unsupported URL scheme '{parts.scheme}': {url}")
        self.url = url
        self.scheme = parts.scheme
        self.name = name or f"url:{url}"
        self._path = parts.path
        self._client = client
        self._timeout = timeout

    def _path_suffix(self) -> Optional[str]:
        return PurePosixPath(unquote(self._path)).suffix or None

    def fetch(self) -> Payload:
        if self.scheme == "file":
            payload = FileResource(url2pathname(self._path)).fetch()
            return Payload(data=payload.data, origin=self.url, format_hint=payload.format_hint)

        try:
            if self._client is not None:
                response = self._client.get(self.url)
            else:
                with httpx.Client(timeout=self._timeout, follow_redirects=True) as client:
                    response = client.get(self.url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise ResourceError(f"Unable to load configuration from {self.url}: {e}") from e

        hint = response.headers.get("content-type") or self._path_suffix()
        return Payload(data=response.content, origin=self.url, format_hint=hint)
