from fastapi import Request

from app.integrations.storage.base import ContentStore
from app.services.upload_service import UploadService


def get_store(request: Request) -> ContentStore:
    return request.app.state.store


def get_upload_service(request: Request) -> UploadService:
    return request.app.state.upload_service
