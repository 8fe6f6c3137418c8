"""
Application settings routes
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..config import AppSettings
from ..services.registry import get_config_repository, get_settings
from ..services.storage import ApiConfigRepository

router = APIRouter(prefix="/settings", tags=["settings"])


class SettingsPayload(BaseModel):
    ai_completion_enabled: bool = True
    cache_max_size_mb: int = Field(500, ge=0)
    cache_auto_clean_days: int = Field(30, ge=0)
    retry_count: int = Field(3, ge=0)
    shortcut_capture: str = "CommandOrControl+Shift+S"
    locale: str = "en-US"


@router.get("")
async def read_settings(settings: AppSettings = Depends(get_settings)) -> Dict[str, Any]:
    return settings.to_dict()


@router.put("")
async def update_settings(
    payload: SettingsPayload,
    repository: ApiConfigRepository = Depends(get_config_repository),
) -> Dict[str, Any]:
    settings = AppSettings(**payload.model_dump())
    settings.save(repository)
    return settings.to_dict()
