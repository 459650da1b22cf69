from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import MagicMock

import httpx
import pytest
import redis

from arbor import BasePath, ResourceError
from arbor.core.paths import DefaultBasePathResolver, resolve_file
from arbor.dotenv import parse_dotenv
from arbor.sources import (
    ArgumentsSource,
    EnvFileSource,
    EnvironmentSource,
    FileResource,
    RedisKeyValueSource,
    UrlResource,
)


def _pairs(source):
    return [(entry.key, entry.value) for entry in source.entries()]


def test_arguments_filter_and_split():
    source = ArgumentsSource(["--a.b=1", "plain", "--flag", "-x=1", "--c==d"])
    assert _pairs(source) == [("a.b", "1"), ("c", "=d")]
    assert source.separator == "."
    assert source.deserializer is None


def test_arguments_default_skip_program_name(monkeypatch):
    monkeypatch.setattr("sys.argv", ["prog", "--port=80"])
    assert _pairs(ArgumentsSource()) == [("port", "80")]


def test_environment_snapshot():
    environ = {"A__B": "1"}
    source = EnvironmentSource(environ)
    environ["C"] = "2"
    assert _pairs(source) == [("A__B", "1")]
    assert source.deserializer == "json"


def test_dotenv_parsing():
    lines = [
        "# comment",
        "",
        "export A=1",
        "B = 'single $A'",
        'C="line\\nbreak"',
        "D=${A}-$HOME_DIR",
        "E=value # trailing comment",
        "not a pair",
        "app.name=demo",
    ]
    values = parse_dotenv(lines, environ={"HOME_DIR": "/home/app"})
    assert values == {
        "A": "1",
        "B": "single $A",
        "C": "line\nbreak",
        "D": "1-/home/app",
        "E": "value",
        "app.name": "demo",
    }


def test_dotenv_environ_wins_over_file():
    values = parse_dotenv(["A=file", "B=$A"], environ={"A": "process"})
    assert values["B"] == "process"


def test_env_file_source(tmp_path: Path):
    env_file = tmp_path / ".env"
    env_file.write_text("DB__HOST=localhost\nDB__PORT=5432\n")
    source = EnvFileSource(env_file, environ={})
    assert _pairs(source) == [("DB__HOST", "localhost"), ("DB__PORT", "5432")]
    assert source.name == "env:.env"


def test_env_file_read_lazily(tmp_path: Path):
    env_file = tmp_path / ".env"
    source = EnvFileSource(env_file)
    with pytest.raises(ResourceError):
        list(source.entries())
    env_file.write_text("A=1\n")
    assert _pairs(source) == [("A", "1")]


def test_redis_prefix_and_expired_keys():
    client = MagicMock()
    client.scan_iter.return_value = iter(["svc:b", "svc:a", "svc:gone"])
    client.mget.return_value = ["1", None, "2"]
    source = RedisKeyValueSource("redis://localhost", prefix="svc:", client=client)
    # keys are sorted before MGET: svc:a, svc:b, svc:gone
    assert _pairs(source) == [("a", "1"), ("gone", "2")]


def test_redis_no_keys():
    client = MagicMock()
    client.scan_iter.return_value = iter([])
    assert _pairs(RedisKeyValueSource("redis://localhost", client=client)) == []
    client.mget.assert_not_called()


def test_redis_error_wrapped():
    client = MagicMock()
    client.scan_iter.side_effect = redis.ConnectionError("refused")
    source = RedisKeyValueSource("redis://localhost", client=client)
    with pytest.raises(ResourceError, match="redis://localhost"):
        list(source.entries())


def test_file_resource(tmp_path: Path):
    config = tmp_path / "app.yml"
    config.write_bytes(b"a: 1\n")
    payload = FileResource(config).fetch()
    assert payload.data == b"a: 1\n"
    assert payload.format_hint == ".yml"
    assert payload.origin == str(config)


def test_file_resource_missing(tmp_path: Path):
    with pytest.raises(ResourceError):
        FileResource(tmp_path / "missing.json").fetch()


def test_url_resource_path_suffix_hint():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"a: 1\n")

    client = httpx.Client(transport=httpx.MockTransport(handler))
    payload = UrlResource("https://example.com/conf/app.yaml", client=client).fetch()
    assert payload.format_hint == ".yaml"
    assert payload.origin == "https://example.com/conf/app.yaml"


def test_url_resource_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    client = httpx.Client(transport=httpx.MockTransport(handler))
    with pytest.raises(ResourceError):
        UrlResource("http://example.com/a.json", client=client).fetch()


@pytest.mark.parametrize("url", ["example.com/a.json", "ftp://example.com/a.json"])
def test_url_resource_rejects_scheme(url):
    with pytest.raises(ValueError):
        UrlResource(url)


def test_resolver_executable_dir(tmp_path: Path):
    script = tmp_path / "bin" / "app.py"
    resolver = DefaultBasePathResolver(argv0=str(script))
    assert resolver.resolve(BasePath.EXECUTABLE) == (tmp_path / "bin").resolve()


def test_resolver_interactive_falls_back_to_cwd(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert DefaultBasePathResolver(argv0="").executable_dir() == Path.cwd()
    assert DefaultBasePathResolver(argv0="-c").executable_dir() == Path.cwd()


def test_resolver_project_dir(tmp_path: Path):
    (tmp_path / "pyproject.toml").write_text("[project]\nname = 'demo'\n")
    script = tmp_path / "src" / "demo" / "main.py"
    resolver = DefaultBasePathResolver(argv0=str(script))
    assert resolver.resolve(BasePath.PROJECT) == tmp_path.resolve()


def test_resolver_project_dir_without_manifest(tmp_path: Path):
    script = tmp_path / "main.py"
    resolver = DefaultBasePathResolver(argv0=str(script), manifest="no-such-manifest.cfg")
    assert resolver.project_dir() == tmp_path.resolve()


def test_resolve_file_absolute_is_normalised(tmp_path: Path):
    path = str(tmp_path / "a" / ".." / "b.json")
    assert resolve_file(path, BasePath.PROJECT) == tmp_path / "b.json"


def test_resolve_file_custom_directory(tmp_path: Path):
    assert resolve_file("../c.json", str(tmp_path / "x")) == tmp_path / "c.json"


def test_resolve_file_pwd(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert resolve_file("c.json", BasePath.PWD) == Path(os.path.normpath(Path.cwd() / "c.json"))


def test_url_resource_file_url_escapes_decoded_once(tmp_path: Path):
    config = tmp_path / "a%25.json"
    config.write_bytes(b'{"a": 1}')
    url = config.as_uri()
    assert url.endswith("a%2525.json")
    assert UrlResource(url).fetch().data == b'{"a": 1}'
