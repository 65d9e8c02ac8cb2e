"""Route accepting file uploads destined for task attachments."""

from __future__ import annotations

from fastapi import APIRouter, File, UploadFile, status

from ...deps import CurrentActorDependency, SettingsDependency, UploaderDependency
from ...schemas import Envelope, UploadResult
from ...services import UploadService

router = APIRouter(tags=["upload"])


@router.post(
    "/upload",
    response_model=Envelope[UploadResult],
    status_code=status.HTTP_200_OK,
    summary="Upload a file and return its public URL",
)
async def upload_file(
    actor: CurrentActorDependency,
    settings: SettingsDependency,
    uploader: UploaderDependency,
    file: UploadFile = File(..., description="File to store."),
) -> Envelope[UploadResult]:
    # One byte past the limit is enough to detect an oversized file.
    data = await file.read(settings.upload_max_bytes + 1)
    result = await UploadService(uploader, settings).upload(
        data,
        content_type=file.content_type,
        filename=file.filename,
    )
    return Envelope[UploadResult](success=True, data=result, message="File uploaded successfully")
