"""Router for the Users feature."""
from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.features.users.controller import UserController
from api.features.users.dtos import CreateUserRequest, CreateUserResponse, UserResponse
from api.shared.db import get_db_session
from di.container import ApplicationContainer as DependencyContainer

router = APIRouter()


@router.post("", status_code=201, response_model=CreateUserResponse)
@inject
async def create_user(
    request: CreateUserRequest,
    controller: UserController = Depends(
        Provide[DependencyContainer.controllers.user_controller]
    ),
    db_session: AsyncSession = Depends(get_db_session),
):
    """Create a user; an already registered email answers 409 with the existing record."""
    return await controller.create_user(
        name=request.name, email=request.email, db_session=db_session
    )


@router.get("/{email}", response_model=UserResponse)
@inject
async def get_user_by_email(
    email: str,
    controller: UserController = Depends(
        Provide[DependencyContainer.controllers.user_controller]
    ),
    db_session: AsyncSession = Depends(get_db_session),
):
    return await controller.get_user(email=email, db_session=db_session)
