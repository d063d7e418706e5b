"""Shared fixtures for the prefstore test suite."""

import os

import pytest

# Widgets are created without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from prefstore.config.settings_store import TypedSettingsStore
from prefstore.security import CryptoBox, FernetProtector
from prefstore.storage import JsonFileBackingStore, MemoryBackingStore, QtSettingsBackingStore


@pytest.fixture(autouse=True)
def isolated_user_dirs(tmp_path, monkeypatch):
    """Point every platform directory at tmp_path so no test touches $HOME."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("APPDATA", str(tmp_path / "config"))
    monkeypatch.setenv("LOCALAPPDATA", str(tmp_path / "cache"))


@pytest.fixture
def crypto(tmp_path):
    return CryptoBox(FernetProtector(tmp_path / "keys" / "user.key"))


@pytest.fixture(params=["memory", "json", "qsettings"])
def backing(request, tmp_path):
    """One instance of each backing technology."""
    if request.param == "memory":
        return MemoryBackingStore()
    if request.param == "json":
        return JsonFileBackingStore(tmp_path / "settings.json")
    return QtSettingsBackingStore(path=tmp_path / "settings.ini")


@pytest.fixture
def store(crypto):
    return TypedSettingsStore(MemoryBackingStore(), crypto)
