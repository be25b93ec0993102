import io
import json
import tarfile
from pathlib import Path

import httpx
import pytest

from gonpm.FileIO import make_client

DEMO_URL = "https://example.test/demo_{{version}}_{{platform}}_{{arch}}.tar.gz"


class FakePrefixProvider:
    """PrefixProvider answering from a fixed directory instead of npm."""

    def __init__(self, prefix: str):
        self.prefix = prefix
        self.calls = 0

    def get_prefix(self) -> str:
        self.calls += 1
        return self.prefix


def build_tarball(files, compression="gz") -> bytes:
    """Return an archive holding `files` (name -> bytes) as executables."""
    buffer = io.BytesIO()
    mode = f"w:{compression}" if compression else "w"
    with tarfile.open(fileobj=buffer, mode=mode) as archive:
        for name, data in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = 0o755
            archive.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


def write_manifest(directory: Path, manifest) -> Path:
    path = directory / "package.json"
    path.write_text(json.dumps(manifest, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def demo_manifest():
    return {
        "version": "0.3.1",
        "goBinary": {"name": "demo", "path": "bin", "url": DEMO_URL},
    }


@pytest.fixture
def project(tmp_path, monkeypatch, demo_manifest):
    """A package directory holding the demo package.json, made the working directory."""
    directory = tmp_path / "project"
    directory.mkdir()
    write_manifest(directory, demo_manifest)
    monkeypatch.chdir(directory)
    return directory


@pytest.fixture
def global_prefix(tmp_path):
    directory = tmp_path / "global"
    directory.mkdir()
    return directory


@pytest.fixture
def provider(global_prefix):
    return FakePrefixProvider(str(global_prefix))


class ArtifactServer:
    """Records requests and serves a configurable response through httpx.MockTransport."""

    def __init__(self):
        self.requests = []
        self.status_code = 200
        self.body = build_tarball({"demo": b"#!/bin/sh\necho demo\n"})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, content=self.body)

    def client(self) -> httpx.Client:
        return make_client(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def server():
    return ArtifactServer()
