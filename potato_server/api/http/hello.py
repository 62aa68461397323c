from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(prefix="/api/test", tags=["test"])


@router.get("/hello", response_class=PlainTextResponse, summary="Static greeting")
async def hello() -> str:
    """Liveness probe returning a fixed greeting."""
    return "Hello from Web API!"
