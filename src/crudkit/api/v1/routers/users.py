from typing import Any

from fastapi import APIRouter, Body, Depends

from crudkit.api.v1.dependencies import get_container, get_current_user
from crudkit.container import Container
from crudkit.schemas.responses import respond

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/register")
async def register(
    payload: dict[str, Any] | None = Body(default=None),
    container: Container = Depends(get_container),
):
    data = container.user_validator.validate("register", payload)
    user = await container.users.register(data)
    return respond(user, "User registered", 201)


@router.post("/login")
async def login(
    payload: dict[str, Any] | None = Body(default=None),
    container: Container = Depends(get_container),
):
    data = container.user_validator.validate("login", payload)
    session = await container.users.authenticate(data)
    return respond(session, "Logged in")


@router.get("/me")
async def read_me(current_user: dict = Depends(get_current_user)):
    return respond(current_user)


@router.patch("/me")
async def update_me(
    payload: dict[str, Any] | None = Body(default=None),
    current_user: dict = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    data = container.user_validator.validate("update", payload)
    user = await container.users.update_profile(current_user["id"], data)
    return respond(user, "User updated")
