"""
Application settings facade.

ApplicationSettings is the only settings surface the UI uses. Each property
is bound to one key, one kind, one default and one encryption policy, and
passes straight through to TypedSettingsStore.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .settings_store import TypedSettingsStore

DEFAULT_LANGUAGE = "en-US"
DEFAULT_WINDOW_WIDTH = 1200.0
DEFAULT_WINDOW_HEIGHT = 800.0


@dataclass(frozen=True)
class SettingsKeys:
    """Centralize the keys used by the application."""

    username: str = "User.Username"
    email: str = "User.Email"
    is_dark_mode: str = "Ui.IsDarkMode"
    language: str = "Ui.Language"
    window_width: str = "Window.Width"
    window_height: str = "Window.Height"
    last_login_date: str = "App.LastLogin"
    is_first_run: str = "App.IsFirstRun"


KEYS = SettingsKeys()


class ApplicationSettings:
    """Typed, named application settings."""

    def __init__(self, store: TypedSettingsStore):
        self.store = store
        self.keys = KEYS

    # User settings

    @property
    def username(self) -> Optional[str]:
        return self.store.get_text(KEYS.username, None)

    @username.setter
    def username(self, value: Optional[str]):
        self.store.set_text(KEYS.username, value)

    @property
    def email(self) -> Optional[str]:
        """Email address, stored encrypted."""
        return self.store.get_text(KEYS.email, None, encrypted=True)

    @email.setter
    def email(self, value: Optional[str]):
        self.store.set_text(KEYS.email, value, encrypted=True)

    # UI settings

    @property
    def is_dark_mode(self) -> bool:
        return self.store.get_bool(KEYS.is_dark_mode, False)

    @is_dark_mode.setter
    def is_dark_mode(self, value: bool):
        self.store.set_bool(KEYS.is_dark_mode, value)

    @property
    def language(self) -> str:
        """UI language tag; falls back to en-US when unset or empty."""
        return self.store.get_text(KEYS.language, DEFAULT_LANGUAGE) or DEFAULT_LANGUAGE

    @language.setter
    def language(self, value: str):
        self.store.set_text(KEYS.language, value)

    @property
    def window_width(self) -> float:
        return self.store.get_number(KEYS.window_width, DEFAULT_WINDOW_WIDTH)

    @window_width.setter
    def window_width(self, value: float):
        self.store.set_number(KEYS.window_width, value)

    @property
    def window_height(self) -> float:
        return self.store.get_number(KEYS.window_height, DEFAULT_WINDOW_HEIGHT)

    @window_height.setter
    def window_height(self, value: float):
        self.store.set_number(KEYS.window_height, value)

    # Application state

    @property
    def last_login_date(self) -> datetime:
        """Last login time; the current time if never recorded."""
        return self.store.get_timestamp(KEYS.last_login_date, datetime.now())

    @last_login_date.setter
    def last_login_date(self, value: datetime):
        self.store.set_timestamp(KEYS.last_login_date, value)

    @property
    def is_first_run(self) -> bool:
        return self.store.get_bool(KEYS.is_first_run, True)

    @is_first_run.setter
    def is_first_run(self, value: bool):
        self.store.set_bool(KEYS.is_first_run, value)
