from fastapi import APIRouter, Depends

from crudkit.api.v1.dependencies import get_container
from crudkit.container import Container
from crudkit.database.client import ping
from crudkit.schemas.responses import respond

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(container: Container = Depends(get_container)):
    # DATABASE_UNAVAILABLE propagates to the error handlers as a 500
    await ping(container.database)
    return respond({"status": "ok", "database": "up"}, "Healthy")
