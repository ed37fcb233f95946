"""Admin management routes."""

from typing import List

from fastapi import APIRouter, Depends, status

from warden.application.services import admin_service
from warden.config import Settings
from warden.domain.repositories.credential_repository import AdminRepository, UserRepository
from warden.domain.schemas.admin import AdminCreate, AdminCreated, AdminRead, PromoteRequest, RemoveRequest
from warden.domain.schemas.auth import Principal
from warden.domain.schemas.base import MessageResponse
from warden.interfaces.api.deps import require_admin, require_super_admin
from warden.interfaces.deps import get_admin_repository, get_settings_dep, get_user_repository

router = APIRouter(prefix="/api", tags=["Admins"])


@router.post("/admins", response_model=AdminCreated, status_code=status.HTTP_201_CREATED)
def create_admin(
    body: AdminCreate,
    admins: AdminRepository = Depends(get_admin_repository),
    super_admin: Principal = Depends(require_super_admin),
):
    admin = admin_service.create_admin(admins, body.email, body.password, super_admin)
    return AdminCreated(id=admin.id, email=admin.email)


@router.get("/admin/list", response_model=List[AdminRead])
def list_admins(
    admins: AdminRepository = Depends(get_admin_repository),
    admin: Principal = Depends(require_admin),
):
    return [AdminRead.model_validate(a) for a in admin_service.list_admins(admins)]


@router.post("/admin/remove", response_model=MessageResponse)
def remove_admin(
    body: RemoveRequest,
    admins: AdminRepository = Depends(get_admin_repository),
    users: UserRepository = Depends(get_user_repository),
    settings: Settings = Depends(get_settings_dep),
    admin: Principal = Depends(require_admin),
):
    message = admin_service.remove(admins, users, body.email, admin, settings)
    return MessageResponse(message=message)


@router.post("/admin/promote", response_model=MessageResponse)
def promote_admin(
    body: PromoteRequest,
    admins: AdminRepository = Depends(get_admin_repository),
    users: UserRepository = Depends(get_user_repository),
    admin: Principal = Depends(require_admin),
):
    message = admin_service.promote(admins, users, body.email, body.password, admin)
    return MessageResponse(message=message)
