"""Settings service: persisted writing preferences per profile."""
import logging
from sqlalchemy.orm import Session as DBSession

from essay.models.session_state import SessionConfig
from shared.models.schemas import EssaySettings, SettingsUpdate
from shared.repositories.settings_repository import SettingsRepository
from shared.utils.constants import DEFAULT_SETTINGS_PROFILE

logger = logging.getLogger(__name__)


class SettingsService:
    """Reads and writes the key-value settings store.

    Missing keys fall back to the EssaySettings defaults, and keys that
    no longer validate are ignored rather than failing the read.
    """

    def __init__(self, db: DBSession, profile: str = DEFAULT_SETTINGS_PROFILE):
        self.repo = SettingsRepository(db)
        self.profile = profile

    def get_settings(self) -> EssaySettings:
        stored = self.repo.get_all(self.profile)
        known = {k: v for k, v in stored.items() if k in EssaySettings.model_fields}
        defaults = EssaySettings()
        valid = {}
        for key, value in known.items():
            try:
                EssaySettings(**{**defaults.model_dump(), key: value})
                valid[key] = value
            except ValueError:
                logger.warning(f"Ignoring invalid stored setting {self.profile}.{key}={value!r}")
        return EssaySettings(**valid)

    def update_settings(self, update: SettingsUpdate) -> EssaySettings:
        changes = update.model_dump(exclude_none=True)
        merged = EssaySettings(**{**self.get_settings().model_dump(), **changes})
        if changes:
            self.repo.upsert_many(self.profile, changes)
            logger.info(f"Updated settings profile '{self.profile}': {sorted(changes)}")
        return merged

    def reset_settings(self) -> EssaySettings:
        removed = self.repo.delete_profile(self.profile)
        logger.info(f"Reset settings profile '{self.profile}' ({removed} keys removed)")
        return EssaySettings()

    def session_config(self) -> SessionConfig:
        return self.get_settings().to_session_config()
