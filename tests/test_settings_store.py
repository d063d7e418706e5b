"""
Tests for TypedSettingsStore and value conversion.
"""

import base64
import logging
from datetime import date, datetime
from decimal import Decimal

import pytest

from prefstore.config import ReadStatus, TypedSettingsStore, ValueKind, coerce, kind_of, to_text
from prefstore.errors import ConversionError, CryptoError, InvalidKeyError, StorageError
from prefstore.security import CryptoBox, Protector
from prefstore.storage import ABSENT, JsonFileBackingStore, MemoryBackingStore


class FailingBackingStore(MemoryBackingStore):
    """Memory store whose operations can be made to fail."""

    def __init__(self, fail_on=()):
        super().__init__()
        self.fail_on = set(fail_on)

    def _do_set(self, key, value):
        if "set" in self.fail_on:
            raise StorageError("disk full")
        super()._do_set(key, value)

    def _do_get(self, key):
        if "get" in self.fail_on:
            raise StorageError("permission denied")
        return super()._do_get(key)

    def _do_remove(self, key):
        if "remove" in self.fail_on:
            raise StorageError("permission denied")
        return super()._do_remove(key)

    def _do_clear(self):
        if "clear" in self.fail_on:
            raise StorageError("permission denied")
        super()._do_clear()


class BrokenProtector(Protector):
    name = "broken"

    def protect(self, data):
        raise OSError("protection service unavailable")

    def unprotect(self, data):
        raise OSError("protection service unavailable")


# ---------------------------------------------------------------------------
# Value conversion
# ---------------------------------------------------------------------------

class TestValues:

    def test_kind_of(self):
        assert kind_of("x") is ValueKind.TEXT
        assert kind_of(True) is ValueKind.BOOL
        assert kind_of(3) is ValueKind.NUMBER
        assert kind_of(3.5) is ValueKind.NUMBER
        assert kind_of(datetime(2024, 1, 1)) is ValueKind.TIMESTAMP

        with pytest.raises(ConversionError):
            kind_of([1, 2])

    def test_to_text(self):
        assert to_text(True) == "true"
        assert to_text(False) == "false"
        assert to_text(1200) == "1200.0"
        assert to_text(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02T03:04:05"
        assert to_text("plain") == "plain"

        with pytest.raises(ConversionError):
            to_text(10 ** 400)

    def test_coerce_bool_from_text(self):
        assert coerce("true", ValueKind.BOOL) is True
        assert coerce("False", ValueKind.BOOL) is False
        assert coerce("1", ValueKind.BOOL) is True
        assert coerce(0, ValueKind.BOOL) is False

        for bad in ["yes", "", 2, 1.5]:
            with pytest.raises(ConversionError):
                coerce(bad, ValueKind.BOOL)

    def test_coerce_number(self):
        assert coerce("1200", ValueKind.NUMBER) == 1200.0
        assert coerce(" 3.25 ", ValueKind.NUMBER) == 3.25
        assert coerce(7, ValueKind.NUMBER) == 7.0

        for bad in ["wide", True, 10 ** 400]:
            with pytest.raises(ConversionError):
                coerce(bad, ValueKind.NUMBER)

    def test_coerce_timestamp(self):
        when = datetime(2024, 5, 1, 8, 30)
        assert coerce(when, ValueKind.TIMESTAMP) == when
        assert coerce("2024-05-01T08:30:00", ValueKind.TIMESTAMP) == when

        for bad in ["yesterday", 1714552200.0]:
            with pytest.raises(ConversionError):
                coerce(bad, ValueKind.TIMESTAMP)

    def test_coerce_text(self):
        assert coerce("alice", ValueKind.TEXT) == "alice"
        assert coerce(True, ValueKind.TEXT) == "true"


# ---------------------------------------------------------------------------
# Round trips through each backing technology
# ---------------------------------------------------------------------------

ROUNDTRIP_CASES = [
    ("User.Username", "alice", "x"),
    ("Ui.IsDarkMode", True, False),
    ("App.IsFirstRun", False, True),
    ("Window.Width", 1280.0, 1200.0),
    ("Window.Height", 42, 800.0),
    ("App.LastLogin", datetime(2024, 1, 2, 3, 4, 5), datetime(2000, 1, 1)),
]


@pytest.mark.parametrize("key,value,default", ROUNDTRIP_CASES)
def test_get_after_set_returns_value(backing, crypto, key, value, default):
    store = TypedSettingsStore(backing, crypto)
    store.set(key, value)

    assert store.get(key, default=default) == value


@pytest.mark.parametrize("key,value,default", ROUNDTRIP_CASES)
def test_encrypted_get_after_set_returns_value(backing, crypto, key, value, default):
    store = TypedSettingsStore(backing, crypto)
    store.set(key, value, encrypted=True)

    assert store.get(key, default=default, encrypted=True) == value
    # Non-text values become text once encrypted
    assert isinstance(backing.get_raw(key), str)


def test_get_before_set_returns_default(store):
    sentinel_default = "unchanged"
    assert store.get("User.Username", default=sentinel_default) is sentinel_default
    assert store.get("Ui.IsDarkMode", default=True) is True
    assert store.get("Never.Set") is None


# ---------------------------------------------------------------------------
# Key validation
# ---------------------------------------------------------------------------

def test_empty_key_fails_for_set_and_get(store):
    for key in ["", "   "]:
        with pytest.raises(InvalidKeyError):
            store.set(key, "v")
        with pytest.raises(InvalidKeyError):
            store.get(key, default="d")
        with pytest.raises(InvalidKeyError):
            store.read(key, default="d")


def test_remove_empty_or_never_set_key_returns_false(store):
    assert store.remove("") is False
    assert store.remove("Never.Set") is False


# ---------------------------------------------------------------------------
# Removal
# ---------------------------------------------------------------------------

def test_remove_existing_key(store):
    store.set("User.Username", "alice")

    assert store.remove("User.Username") is True
    assert store.get("User.Username", default="x") == "x"


def test_clear_twice_then_defaults(store):
    store.set("User.Username", "alice")
    store.set("Ui.IsDarkMode", True)

    assert store.clear() is True
    assert store.clear() is True
    assert store.backing.keys() == []
    assert store.get("User.Username", default="x") == "x"
    assert store.get("Ui.IsDarkMode", default=False) is False


def test_set_none_removes_entry(store):
    store.set("User.Username", "alice")
    store.set("User.Username", None)

    assert store.backing.get_raw("User.Username") is ABSENT
    assert store.get("User.Username", default="x") == "x"


# ---------------------------------------------------------------------------
# Encryption flag stays at the call site
# ---------------------------------------------------------------------------

def test_encrypted_email_roundtrip_and_flag_mismatch(store):
    store.set("User.Email", "a@b.com", encrypted=True)

    assert store.get("User.Email", default="", encrypted=True) == "a@b.com"

    undecoded = store.get("User.Email", default="", encrypted=False)
    assert undecoded != "a@b.com"
    assert undecoded == store.backing.get_raw("User.Email")
    base64.b64decode(undecoded, validate=True)


def test_plaintext_read_with_encrypted_flag_degrades(store):
    store.set("User.Email", "a@b.com")

    result = store.read("User.Email", default="fallback", encrypted=True)

    assert result.value == "fallback"
    assert result.degraded


def test_corrupt_ciphertext_returns_default(store):
    store.backing.set_raw("User.Email", "not base64!!")

    assert store.get("User.Email", default="fallback", encrypted=True) == "fallback"

    result = store.read("User.Email", default="fallback", encrypted=True)
    assert result.status is ReadStatus.DEGRADED
    assert isinstance(result.error, CryptoError)


# ---------------------------------------------------------------------------
# Read diagnostics
# ---------------------------------------------------------------------------

def test_read_status_found_and_absent(store):
    assert store.read("Ui.Language", default="en-US").status is ReadStatus.ABSENT

    store.set("Ui.Language", "de-DE")
    result = store.read("Ui.Language", default="en-US")

    assert result.found
    assert result.value == "de-DE"
    assert result.error is None


def test_unconvertible_value_returns_default(store, caplog):
    store.backing.set_raw("Window.Width", "wide")

    with caplog.at_level(logging.WARNING):
        result = store.read("Window.Width", default=1200.0)

    assert result.value == 1200.0
    assert result.degraded
    assert isinstance(result.error, ConversionError)
    assert "Window.Width" in caplog.text


def test_out_of_range_number_in_file_returns_default(tmp_path, crypto, caplog):
    path = tmp_path / "settings.json"
    path.write_text('{"Window.Width": 1' + "0" * 400 + "}", encoding="utf-8")
    store = TypedSettingsStore(JsonFileBackingStore(path), crypto)

    with caplog.at_level(logging.WARNING):
        result = store.read("Window.Width", default=1200.0)

    assert result.value == 1200.0
    assert result.degraded
    assert isinstance(result.error, ConversionError)
    assert store.get("Window.Width", default=1200.0) == 1200.0
    assert store.get_text("Window.Width", default="") == ""
    assert "Window.Width" in caplog.text


@pytest.mark.parametrize("default", [date(2024, 1, 1), Decimal("1.5"), [1]])
def test_unsupported_default_type_degrades(store, default, caplog):
    with caplog.at_level(logging.WARNING):
        result = store.read("Window.Geometry", default=default)

    assert result.value is default
    assert result.degraded
    assert isinstance(result.error, ConversionError)
    assert store.get("Window.Geometry", default=default) is default
    assert "Window.Geometry" in caplog.text


def test_storage_failure_on_read_returns_default(crypto):
    store = TypedSettingsStore(FailingBackingStore(fail_on={"get"}), crypto)

    result = store.read("Ui.IsDarkMode", default=False)

    assert result.value is False
    assert isinstance(result.error, StorageError)


def test_explicit_kind_overrides_default_type(store):
    store.backing.set_raw("Window.Width", "1024")

    assert store.get("Window.Width", kind=ValueKind.NUMBER) == 1024.0
    assert store.get_number("Window.Width") == 1024.0
    assert store.get_text("Window.Width") == "1024"


def test_typed_getters(store):
    when = datetime(2023, 12, 31, 23, 59)
    store.set_text("User.Username", "bob")
    store.set_bool("Ui.IsDarkMode", True)
    store.set_number("Window.Width", 1600)
    store.set_timestamp("App.LastLogin", when)

    assert store.get_text("User.Username") == "bob"
    assert store.get_bool("Ui.IsDarkMode") is True
    assert store.get_number("Window.Width") == 1600.0
    assert store.get_timestamp("App.LastLogin") == when


# ---------------------------------------------------------------------------
# Write failures surface
# ---------------------------------------------------------------------------

def test_unsupported_value_type_raises(store, caplog):
    with caplog.at_level(logging.ERROR):
        with pytest.raises(ConversionError):
            store.set("Window.Geometry", [0, 0, 800, 600])

    assert "Window.Geometry" in caplog.text


def test_out_of_range_number_raises_and_is_logged(store, caplog):
    with caplog.at_level(logging.ERROR):
        with pytest.raises(ConversionError):
            store.set("Window.Width", 10 ** 400)
        with pytest.raises(ConversionError):
            store.set("Window.Height", 10 ** 400, encrypted=True)

    assert "Window.Width" in caplog.text
    assert "Window.Height" in caplog.text
    assert store.backing.get_raw("Window.Width") is ABSENT
    assert store.backing.get_raw("Window.Height") is ABSENT


def test_typed_setter_rejects_other_kinds(store):
    with pytest.raises(ConversionError):
        store.set_bool("Ui.IsDarkMode", "yes")

    with pytest.raises(ConversionError):
        store.set_number("Window.Width", True)


def test_storage_failure_on_write_raises(crypto):
    store = TypedSettingsStore(FailingBackingStore(fail_on={"set"}), crypto)

    with pytest.raises(StorageError):
        store.set("User.Username", "alice")


def test_encryption_failure_on_write_raises():
    store = TypedSettingsStore(MemoryBackingStore(), CryptoBox(BrokenProtector()))

    with pytest.raises(CryptoError):
        store.set("User.Email", "a@b.com", encrypted=True)

    assert store.backing.get_raw("User.Email") is ABSENT


def test_remove_failure_raises(crypto):
    backing = FailingBackingStore(fail_on={"remove"})
    backing.set_raw("User.Username", "alice")
    store = TypedSettingsStore(backing, crypto)

    with pytest.raises(StorageError):
        store.remove("User.Username")


def test_clear_failure_returns_false(crypto):
    store = TypedSettingsStore(FailingBackingStore(fail_on={"clear"}), crypto)

    assert store.clear() is False


def test_values_are_not_logged(store, caplog):
    with caplog.at_level(logging.DEBUG):
        store.set("User.Email", "a@b.com", encrypted=True)
        store.get("User.Email", default="", encrypted=True)

    assert "a@b.com" not in caplog.text
