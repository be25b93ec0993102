"""Tests for host detection and the vendor lookup tables."""
from types import SimpleNamespace

import pytest

from gonpm.Platforms import PlatformTables, detect_host, normalize_platform


@pytest.mark.parametrize("machine, expected", [
    ("x86_64", "amd64"),
    ("AMD64", "amd64"),
    ("i686", "386"),
    ("armv7l", "arm"),
    ("aarch64", "arm64"),
    ("arm64", "arm64"),
])
def test_vendor_arch(machine, expected):
    assert PlatformTables().vendor_arch(machine) == expected


@pytest.mark.parametrize("host, expected", [
    ("linux", "linux"),
    ("darwin", "darwin"),
    ("win32", "windows"),
    ("freebsd", "freebsd"),
])
def test_vendor_platform(host, expected):
    assert PlatformTables().vendor_platform(host) == expected


def test_unknown_identifiers_have_no_token():
    tables = PlatformTables()
    assert tables.vendor_arch("sparc64") is None
    assert tables.vendor_platform("aix") is None


def test_tables_are_read_only():
    tables = PlatformTables()
    with pytest.raises(TypeError):
        tables.arch["sparc64"] = "sparc64"


def test_custom_tables():
    tables = PlatformTables(arch={"riscv64": "riscv64"}, platform={"linux": "linux"})
    assert tables.vendor_arch("riscv64") == "riscv64"
    assert tables.vendor_arch("x86_64") is None


def test_normalize_platform_strips_release():
    assert normalize_platform("freebsd13") == "freebsd"
    assert normalize_platform("linux") == "linux"
    assert normalize_platform("win32") == "win32"


def test_detect_host(monkeypatch):
    monkeypatch.setattr("gonpm.Platforms.sys", SimpleNamespace(platform="freebsd14"))
    monkeypatch.setattr("gonpm.Platforms.platform.machine", lambda: "AMD64")
    assert detect_host() == ("freebsd", "amd64")
