"""
Provider configuration routes.

Plaintext API keys are accepted on save and on connection tests, and never
returned.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ..models import ApiConfig, ConnectionTestResponse
from ..services import connection
from ..services.api_configs import ApiConfigService
from ..services.registry import get_config_service

router = APIRouter(prefix="/api-configs", tags=["api-configs"])


@router.get("", response_model=List[ApiConfig])
async def list_api_configs(service: ApiConfigService = Depends(get_config_service)):
    """List configurations, oldest first"""
    return service.list()


@router.post("", response_model=ApiConfig)
async def save_api_config(config: ApiConfig, service: ApiConfigService = Depends(get_config_service)):
    """Create or update a configuration"""
    return service.save(config)


@router.delete("/{config_id}")
async def delete_api_config(config_id: str, service: ApiConfigService = Depends(get_config_service)):
    """Delete a configuration and its stored key"""
    if not service.delete(config_id):
        raise HTTPException(status_code=404, detail=f"API config not found: {config_id}")
    return {"deleted": config_id}


@router.post("/test", response_model=ConnectionTestResponse)
async def test_api_config(config: ApiConfig):
    """Check the endpoint with the submitted credentials"""
    ok = await connection.test_api_connection(config)
    return ConnectionTestResponse(ok=ok)
