"""Shared pytest fixtures for Baseline Resolver tests.

Network access is replaced by a fake urlopen serving canned responses, and
artifact archives are built in memory.
"""

import io
import json
import urllib.error
import zipfile
from pathlib import Path

import pytest

from baseline import sources


def build_zip(entries: dict[str, bytes]) -> bytes:
    """Build an in-memory zip archive from {member name: content}."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, data in entries.items():
            zf.writestr(name, data)
    return buffer.getvalue()


class FakeResponse(io.BytesIO):
    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


class FakeHttp:
    """Canned HTTP responses keyed by URL.

    A bytes value is served as the body; an int value is raised as an
    HTTPError with that status; an exception instance is raised as is.
    Unknown URLs answer 404.
    """

    def __init__(self):
        self.routes: dict[str, object] = {}
        self.calls: list[tuple[str, str, float | None]] = []

    def urlopen(self, req, timeout=None):
        url = req.full_url if hasattr(req, "full_url") else req
        method = req.get_method() if hasattr(req, "get_method") else "GET"
        self.calls.append((method, url, timeout))

        route = self.routes.get(url, 404)
        if isinstance(route, Exception):
            raise route
        if isinstance(route, int):
            raise urllib.error.HTTPError(url, route, "Fake status", None, None)
        return FakeResponse(route)


@pytest.fixture
def fake_http(monkeypatch):
    """Install FakeHttp in place of urllib.request.urlopen for baseline.sources."""
    http = FakeHttp()
    monkeypatch.setattr(sources.urllib.request, "urlopen", http.urlopen)
    return http


@pytest.fixture
def extension_folder(tmp_path: Path) -> Path:
    """Extension project folder with an app.json for 'Foo'."""
    folder = tmp_path / "App" / "Foo"
    folder.mkdir(parents=True)
    descriptor = {
        "id": "00000000-0000-0000-0000-000000000001",
        "name": "Foo",
        "publisher": "Microsoft",
        "version": "26.0.0.0",
    }
    (folder / "app.json").write_text(json.dumps(descriptor), encoding="utf-8")
    return folder


class FakeSource:
    """ArtifactSource that writes app files into the staging directory."""

    def __init__(self, filenames: list[str] | None = None, error: Exception | None = None):
        self.filenames = filenames if filenames is not None else ["Microsoft_Foo_24.0.0.0.app"]
        self.error = error
        self.staging_dirs: list[Path] = []

    def locate(self, extension_name: str, version: str, staging_dir: Path) -> Path:
        self.staging_dirs.append(staging_dir)
        app_dir = staging_dir / "Apps" / extension_name / "Default"
        app_dir.mkdir(parents=True)
        for name in self.filenames:
            (app_dir / name).write_bytes(f"{extension_name}:{version}".encode())
        if self.error is not None:
            raise self.error
        return sources.find_single_match(app_dir, "*.app")


class FakeFeed:
    """VersionFeed with a fixed answer."""

    def __init__(self, latest: str | None):
        self.latest = latest
        self.queries: list[str] = []

    def find_latest_version(self, package_id: str) -> str | None:
        self.queries.append(package_id)
        return self.latest
