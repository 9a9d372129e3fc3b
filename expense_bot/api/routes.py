from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter()


@router.get("/health-check", response_class=PlainTextResponse)
def health_check():
    return "Bot is alive\n"
