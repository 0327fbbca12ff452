"""
Endpoints de autenticacion contra Firebase.
Permiten que el servicio obtenga una identidad para sincronizar.
"""
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from budget_sync.api.v1.dependencies.sync_deps import get_auth_gate
from budget_sync.infrastructure.external.firebase.auth_client import FirebaseAuthGate


router = APIRouter(prefix="/auth", tags=["Auth"])


class CredentialsDTO(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)


class IdentityDTO(BaseModel):
    authenticated: bool
    uid: Optional[str] = None
    email: Optional[str] = None


def _identity_response(auth_gate: FirebaseAuthGate) -> IdentityDTO:
    identity = auth_gate.current_identity()
    if identity is None:
        return IdentityDTO(authenticated=False)
    return IdentityDTO(authenticated=True, uid=identity.uid, email=identity.email)


@router.post("/sign-in", response_model=IdentityDTO)
async def sign_in(
    dto: CredentialsDTO,
    auth_gate: FirebaseAuthGate = Depends(get_auth_gate)
) -> IdentityDTO:
    await auth_gate.sign_in(dto.email, dto.password)
    return _identity_response(auth_gate)


@router.post("/sign-up", response_model=IdentityDTO)
async def sign_up(
    dto: CredentialsDTO,
    auth_gate: FirebaseAuthGate = Depends(get_auth_gate)
) -> IdentityDTO:
    await auth_gate.sign_up(dto.email, dto.password)
    return _identity_response(auth_gate)


@router.post("/sign-out", response_model=IdentityDTO)
async def sign_out(auth_gate: FirebaseAuthGate = Depends(get_auth_gate)) -> IdentityDTO:
    auth_gate.sign_out()
    return _identity_response(auth_gate)


@router.get("/me", response_model=IdentityDTO)
async def me(auth_gate: FirebaseAuthGate = Depends(get_auth_gate)) -> IdentityDTO:
    return _identity_response(auth_gate)
