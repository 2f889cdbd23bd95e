from __future__ import annotations

from functools import lru_cache

from fastapi import APIRouter, Depends, HTTPException, status

from skillproof.adapters import UnknownPlatformError
from skillproof.schemas import (
    CollectRequest,
    PlatformDescriptor,
    SkillVerificationResult,
    VerifyRequest,
)
from skillproof.services import SkillVerificationService

router = APIRouter()


@lru_cache(maxsize=1)
def get_verification_service() -> SkillVerificationService:
    return SkillVerificationService()


@router.get("/platforms", response_model=list[PlatformDescriptor])
async def list_platforms(service: SkillVerificationService = Depends(get_verification_service)):
    return service.registry.describe()


@router.get("/platforms/{platform_id}", response_model=PlatformDescriptor)
async def get_platform(platform_id: str, service: SkillVerificationService = Depends(get_verification_service)):
    try:
        return service.registry.get(platform_id).describe()
    except UnknownPlatformError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.post("/skills/verify", response_model=SkillVerificationResult)
def verify_skills(payload: VerifyRequest, service: SkillVerificationService = Depends(get_verification_service)):
    platform_records = [(entry.platform_id, entry.records) for entry in payload.platforms]
    return service.analyze(payload.user_id, platform_records)


@router.post("/skills/collect", response_model=SkillVerificationResult)
async def collect_skills(payload: CollectRequest, service: SkillVerificationService = Depends(get_verification_service)):
    return await service.verify(payload.user_id, payload.credentials)
