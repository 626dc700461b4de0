from __future__ import annotations

from fastapi import APIRouter, status

from rental_service.api.deps import CurrentPrincipal, HasherDep, TokenCodecDep, UoWDep
from rental_service.api.v1.schemas.user import (
    AuthResponse,
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    UserResponse,
)
from rental_service.application.dto.user import ProfileUpdateDTO, RegisterUserDTO
from rental_service.services import auth_service

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    uow: UoWDep,
    hasher: HasherDep,
    codec: TokenCodecDep,
) -> AuthResponse:
    dto = RegisterUserDTO(
        name=body.name,
        email=body.email,
        password=body.password,
        phone=body.phone,
        role=body.role,
    )
    user, token = await auth_service.register(dto, uow, hasher, codec)
    return AuthResponse(token=token, user=UserResponse.model_validate(user))


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    uow: UoWDep,
    hasher: HasherDep,
    codec: TokenCodecDep,
) -> AuthResponse:
    user, token = await auth_service.login(body.email, body.password, uow, hasher, codec)
    return AuthResponse(token=token, user=UserResponse.model_validate(user))


@router.get("/user/profile", response_model=UserResponse)
async def get_profile(principal: CurrentPrincipal, uow: UoWDep) -> UserResponse:
    user = await auth_service.get_profile(principal, uow)
    return UserResponse.model_validate(user)


@router.put("/user/profile", response_model=UserResponse)
async def update_profile(
    body: ProfileUpdateRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> UserResponse:
    dto = ProfileUpdateDTO(name=body.name, phone=body.phone, address=body.address, bio=body.bio)
    user = await auth_service.update_profile(principal, dto, uow)
    return UserResponse.model_validate(user)
