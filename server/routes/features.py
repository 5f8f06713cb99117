"""
Feature flag endpoints.

Lists the flags and lets the client flip its own toggles (memory, web search).
"""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ..state import get_feature_manager


router = APIRouter()


class FeatureInfo(BaseModel):
    name: str
    description: str
    stage: str
    default: bool
    enabled: bool
    overridden: bool


class FeatureState(BaseModel):
    name: str
    enabled: bool


class FeatureToggle(BaseModel):
    enabled: bool


@router.get("/features")
async def list_features() -> list[FeatureInfo]:
    """Every flag with its effective state."""
    return [FeatureInfo(**f) for f in get_feature_manager().list_features()]


@router.get("/features/{feature_name}")
async def get_feature(feature_name: str) -> FeatureState:
    """Effective state of one flag. Unknown names report disabled."""
    return FeatureState(name=feature_name, enabled=get_feature_manager().is_enabled(feature_name))


@router.post("/features/{feature_name}")
async def set_feature(feature_name: str, toggle: FeatureToggle) -> FeatureState:
    """Turn a flag on or off. User toggles are saved to preferences."""
    manager = get_feature_manager()
    try:
        if toggle.enabled:
            manager.enable(feature_name)
        else:
            manager.disable(feature_name)
    except KeyError:
        raise HTTPException(status_code=404, detail="Feature not found")
    return FeatureState(name=feature_name, enabled=manager.is_enabled(feature_name))
