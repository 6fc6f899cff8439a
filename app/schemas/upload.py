from pydantic import BaseModel


class UploadResponse(BaseModel):
    url: str


class ErrorResponse(BaseModel):
    error: str
