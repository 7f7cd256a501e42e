from typing import List, Optional
from fastapi import APIRouter, Depends, File, UploadFile
from relay.api.schemas import ErrorResponse, HealthResponse, UploadResponse
from relay.api.dependencies import get_relay_service
from relay.services.relay_service import RelayService

router = APIRouter(tags=["uploads"])

@router.get("/", response_model=HealthResponse)
async def health():
    """
    Report that the relay is up.
    """
    return HealthResponse(success=True, message="Server is working fine")

@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def upload_files(
    files: Optional[List[UploadFile]] = File(None),
    relay_service: RelayService = Depends(get_relay_service)
):
    """
    Receive one or more files and forward the first to the provider.
    """
    result = await relay_service.relay(files or [])
    return UploadResponse(success=True, message="Uploaded successfully", result=result)
