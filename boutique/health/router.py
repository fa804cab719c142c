from fastapi import APIRouter, Request
from boutique.health.service import health_config_info
from boutique.utils.rate_limit import rate_limit_health_info

router = APIRouter(prefix="/health", tags=["Health"])

@router.get("")
def health_root():
    return {"ok": True}

@router.get("/config")
def health_config(request: Request):
    return {**health_config_info(), "rate_limit": rate_limit_health_info(request)}
