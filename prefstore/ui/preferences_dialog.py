"""
Preferences dialog for prefstore.

Lets the user edit account details, theme, language and window size.
Reads and writes go through ApplicationSettings only.
"""

import logging
from typing import Optional

from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QFormLayout,
    QLineEdit, QCheckBox, QComboBox, QDoubleSpinBox,
    QPushButton, QGroupBox, QMessageBox, QWidget,
)

from ..config import ApplicationSettings
from ..errors import SettingsError

logger = logging.getLogger(__name__)

LANGUAGES = ["en-US", "en-GB", "de-DE", "fr-FR", "es-ES", "ar-SA"]


class PreferencesDialog(QDialog):
    """User preferences dialog."""

    def __init__(self, settings: ApplicationSettings, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.settings = settings
        self.last_error: Optional[Exception] = None
        self._init_ui()
        self._load_values()

    def _init_ui(self):
        """Build the dialog UI."""
        self.setWindowTitle("Preferences")
        self.setMinimumWidth(400)

        layout = QVBoxLayout(self)

        # Account
        account_group = QGroupBox("Account")
        account_form = QFormLayout()

        self.username_edit = QLineEdit()
        account_form.addRow("Username:", self.username_edit)

        self.email_edit = QLineEdit()
        self.email_edit.setPlaceholderText("name@example.com")
        account_form.addRow("Email:", self.email_edit)

        account_group.setLayout(account_form)
        layout.addWidget(account_group)

        # Appearance
        ui_group = QGroupBox("Appearance")
        ui_form = QFormLayout()

        self.dark_mode_check = QCheckBox("Use dark theme")
        ui_form.addRow(self.dark_mode_check)

        self.language_combo = QComboBox()
        self.language_combo.setEditable(True)
        self.language_combo.addItems(LANGUAGES)
        ui_form.addRow("Language:", self.language_combo)

        ui_group.setLayout(ui_form)
        layout.addWidget(ui_group)

        # Window
        window_group = QGroupBox("Window")
        window_form = QFormLayout()

        self.width_spin = QDoubleSpinBox()
        self.width_spin.setRange(320.0, 10000.0)
        self.width_spin.setDecimals(0)
        window_form.addRow("Width:", self.width_spin)

        self.height_spin = QDoubleSpinBox()
        self.height_spin.setRange(240.0, 10000.0)
        self.height_spin.setDecimals(0)
        window_form.addRow("Height:", self.height_spin)

        window_group.setLayout(window_form)
        layout.addWidget(window_group)

        # Buttons
        button_layout = QHBoxLayout()
        button_layout.addStretch()

        self.save_button = QPushButton("Save")
        self.save_button.clicked.connect(self._on_save)
        button_layout.addWidget(self.save_button)

        self.cancel_button = QPushButton("Cancel")
        self.cancel_button.clicked.connect(self.reject)
        button_layout.addWidget(self.cancel_button)

        layout.addLayout(button_layout)

    def _load_values(self):
        """Load current settings into form fields."""
        self.username_edit.setText(self.settings.username or "")
        self.email_edit.setText(self.settings.email or "")
        self.dark_mode_check.setChecked(self.settings.is_dark_mode)
        self.language_combo.setCurrentText(self.settings.language)
        self.width_spin.setValue(self.settings.window_width)
        self.height_spin.setValue(self.settings.window_height)

    def save(self) -> bool:
        """
        Write form values to settings.

        Returns:
            True if every value was stored, False if a write failed
        """
        try:
            self.settings.username = self.username_edit.text().strip() or None
            self.settings.email = self.email_edit.text().strip() or None
            self.settings.is_dark_mode = self.dark_mode_check.isChecked()
            self.settings.language = self.language_combo.currentText().strip() or "en-US"
            self.settings.window_width = self.width_spin.value()
            self.settings.window_height = self.height_spin.value()
        except SettingsError as e:
            logger.error(f"Failed to save preferences: {e}")
            self.last_error = e
            return False

        self.last_error = None
        return True

    def _on_save(self):
        """Save form values and close, or report the failure."""
        if self.save():
            self.accept()
            return

        QMessageBox.critical(
            self,
            "Preferences",
            f"Your preferences could not be saved:\n\n{self.last_error}",
        )
