"""Settings service: reads and writes the global AppSettings document.

AppSettings itself is a pure value object; every storage round-trip goes
through this service, so reading a setting never triggers I/O.
"""

import json
import logging
from typing import Any

from domain.model.errors import ValidationError
from domain.model.settings import SETTINGS_VERSION, AppSettings
from port.settings_repository import SettingsRepository

logger = logging.getLogger(__name__)


class SettingsService:
    def __init__(self, repo: SettingsRepository):
        self.repo = repo

    def load(self) -> AppSettings:
        """Stored values layered over the defaults.

        Each stored key is validated on its own; a key whose value fails
        validation keeps its default and the rest of the document still applies.
        """
        stored = self.repo.load()
        if not stored:
            return AppSettings()

        settings = AppSettings()
        invalid = []
        for key, value in stored.items():
            if key not in AppSettings.field_names():
                continue
            try:
                settings = settings.merged({key: value})
            except ValidationError:
                invalid.append(key)
        if invalid:
            logger.error("Stored settings are invalid, using defaults for them", extra={"keys": invalid})
        return settings

    def update(self, changes: dict[str, Any]) -> AppSettings:
        """Validate and persist a partial update.

        Raises:
            ValidationError: unknown key or wrong value type
        """
        updated = self.load().merged(changes)
        self.repo.save({k: updated.to_dict()[k] for k in changes})
        logger.info("Settings updated", extra={"keys": sorted(changes)})
        return updated

    def reset_to_defaults(self) -> AppSettings:
        self.repo.clear()
        defaults = AppSettings()
        self.repo.save(defaults.to_dict())
        logger.info("Settings reset to defaults")
        return defaults

    def export_settings(self) -> str:
        payload = {"version": SETTINGS_VERSION, "settings": self.load().to_dict()}
        return json.dumps(payload, indent=2, sort_keys=True)

    def import_settings(self, raw: str) -> AppSettings:
        """Replace stored settings with an exported JSON document.

        Accepts either the export envelope or a bare settings object.

        Raises:
            ValidationError: malformed JSON or invalid settings
        """
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Settings file is not valid JSON: {e.msg}") from e
        if not isinstance(payload, dict):
            raise ValidationError("Settings file must contain a JSON object")

        values = payload.get("settings", payload)
        if not isinstance(values, dict):
            raise ValidationError("'settings' must be a JSON object")
        values = {k: v for k, v in values.items() if k != "version"}

        imported = AppSettings().merged(values)
        self.repo.clear()
        self.repo.save(imported.to_dict())
        logger.info("Settings imported", extra={"keys": sorted(values)})
        return imported
