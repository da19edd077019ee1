"""Settings data access layer."""
import json
import logging
from typing import Any
from sqlalchemy.orm import Session as DBSession
from datetime import datetime

from shared.models.entities import EssaySetting

logger = logging.getLogger(__name__)


class SettingsRepository:
    """Repository for the key-value essay_settings table."""

    def __init__(self, db: DBSession):
        self.db = db

    def get_all(self, profile: str) -> dict[str, Any]:
        """Return every stored key for a profile, decoded."""
        rows = self.db.query(EssaySetting).filter(EssaySetting.profile == profile).all()
        values = {}
        for row in rows:
            try:
                values[row.key] = json.loads(row.value_json)
            except json.JSONDecodeError:
                logger.warning(f"Ignoring undecodable setting {profile}.{row.key}")
        return values

    def upsert_many(self, profile: str, values: dict[str, Any]) -> None:
        """Insert or update several keys in one transaction."""
        existing = {
            row.key: row
            for row in self.db.query(EssaySetting).filter(EssaySetting.profile == profile).all()
        }
        now = datetime.utcnow()
        for key, value in values.items():
            encoded = json.dumps(value)
            row = existing.get(key)
            if row:
                row.value_json = encoded
                row.updated_at = now
            else:
                self.db.add(EssaySetting(profile=profile, key=key, value_json=encoded, updated_at=now))
        self.db.commit()

    def delete_profile(self, profile: str) -> int:
        count = self.db.query(EssaySetting).filter(EssaySetting.profile == profile).delete()
        self.db.commit()
        return count
