from fastapi import APIRouter, Request, status

from src.api.utils.cors import cors_json_response

router = APIRouter()


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check(request: Request):
    return cors_json_response(request, status.HTTP_200_OK, {"status": "ok"})
