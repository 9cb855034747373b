"""Global settings routes.

Reading is public so sign-in pages can render the right options;
writing, resetting, exporting and importing require an admin.
"""

import json
import logging
from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import Response

from api.dependencies import get_settings_service
from api.models import SettingsResponse
from api.security import require_admin
from domain.model.user import CallerClaims
from services.settings_service import SettingsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=SettingsResponse)
async def get_settings(service: SettingsService = Depends(get_settings_service)):
    return SettingsResponse(settings=service.load().to_dict())


@router.patch("", response_model=SettingsResponse)
async def update_settings(
    changes: dict[str, Any] = Body(...),
    caller: CallerClaims = Depends(require_admin),
    service: SettingsService = Depends(get_settings_service),
):
    updated = service.update(changes)
    logger.info("Settings changed", extra={"callerId": caller.user_id, "keys": sorted(changes)})
    return SettingsResponse(settings=updated.to_dict())


@router.post("/reset", response_model=SettingsResponse)
async def reset_settings(
    caller: CallerClaims = Depends(require_admin),
    service: SettingsService = Depends(get_settings_service),
):
    defaults = service.reset_to_defaults()
    logger.info("Settings reset", extra={"callerId": caller.user_id})
    return SettingsResponse(settings=defaults.to_dict())


@router.get("/export")
async def export_settings(
    caller: CallerClaims = Depends(require_admin),
    service: SettingsService = Depends(get_settings_service),
):
    return Response(
        content=service.export_settings(),
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="settings.json"'},
    )


@router.post("/import", response_model=SettingsResponse)
async def import_settings(
    payload: dict[str, Any] = Body(...),
    caller: CallerClaims = Depends(require_admin),
    service: SettingsService = Depends(get_settings_service),
):
    imported = service.import_settings(json.dumps(payload))
    logger.info("Settings imported", extra={"callerId": caller.user_id})
    return SettingsResponse(settings=imported.to_dict())
