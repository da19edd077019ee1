"""Settings API endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session as DBSession

from database import get_db
from shared.models.schemas import EssaySettings, SettingsUpdate
from shared.services.settings_service import SettingsService

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=EssaySettings)
def get_settings(db: DBSession = Depends(get_db)):
    return SettingsService(db).get_settings()


@router.put("", response_model=EssaySettings)
def update_settings(request: SettingsUpdate, db: DBSession = Depends(get_db)):
    """Update some or all settings; out-of-range values are rejected with 422."""
    return SettingsService(db).update_settings(request)


@router.post("/reset", response_model=EssaySettings)
def reset_settings(db: DBSession = Depends(get_db)):
    return SettingsService(db).reset_settings()
