from fastapi import APIRouter, Request

from miniapp_notifications.interfaces.api.schemas import HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
async def root(request: Request) -> HealthResponse:
    store = request.app.state.key_value_store
    return HealthResponse(status="ok", store=store.name)
