from fastapi import APIRouter, Depends, File, UploadFile
from prometheus_client import Counter

from app.api.deps import get_upload_service
from app.core.exceptions import UploadError
from app.schemas.upload import ErrorResponse, UploadResponse
from app.services.upload_service import UploadRequest, UploadService

router = APIRouter(tags=["upload"])
UPLOAD_COUNTER = Counter("gitshelf_uploads_total", "Image uploads by outcome", ["result"])


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def upload_image(
    image: UploadFile | None = File(default=None),
    service: UploadService = Depends(get_upload_service),
):
    request = None
    if image is not None:
        request = UploadRequest(
            content=await image.read(),
            file_name=image.filename or "",
            content_type=image.content_type,
        )
    try:
        url = await service.upload(request)
    except UploadError as exc:
        UPLOAD_COUNTER.labels(result=exc.kind).inc()
        raise
    UPLOAD_COUNTER.labels(result="ok").inc()
    return UploadResponse(url=url)
