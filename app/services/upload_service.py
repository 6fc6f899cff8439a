import asyncio
from dataclasses import dataclass

import structlog

from app.core.config import Settings
from app.core.constants import NO_IMAGE_MESSAGE, TOO_LARGE_MESSAGE, UploadStage
from app.core.exceptions import BadRequest, UploadError
from app.integrations.storage.base import ContentStore
from app.services.namespace_service import NamespaceBootstrapper
from app.services.normalizer import AssetNormalizer
from app.services.path_resolver import PathResolver
from app.services.writer_service import ConditionalWriter

logger = structlog.get_logger()


@dataclass
class UploadRequest:
    content: bytes
    file_name: str
    content_type: str | None = None


class UploadService:
    def __init__(
        self,
        settings: Settings,
        store: ContentStore,
        resolver: PathResolver | None = None,
    ) -> None:
        self.max_upload_bytes = settings.max_upload_bytes
        self.normalizer = AssetNormalizer(settings.transcode_extension_set, settings.transcode_format)
        self.resolver = resolver or PathResolver(settings.storage_namespace)
        self.bootstrapper = NamespaceBootstrapper(store, settings.storage_namespace)
        self.writer = ConditionalWriter(store, store.branch)

    def validate(self, request: UploadRequest | None) -> UploadRequest:
        if request is None or not request.content:
            raise BadRequest(NO_IMAGE_MESSAGE)
        if len(request.content) > self.max_upload_bytes:
            raise BadRequest(TOO_LARGE_MESSAGE)
        return request

    async def upload(self, request: UploadRequest | None) -> str:
        log = logger.bind(
            file_name=request.file_name if request else None,
            content_type=request.content_type if request else None,
        )
        stage = UploadStage.RECEIVED

        def advance(to: UploadStage) -> None:
            nonlocal stage
            stage = to
            log.debug("upload_stage", stage=to)

        try:
            request = self.validate(request)

            asset = await asyncio.to_thread(self.normalizer.normalize, request.content, request.file_name)
            advance(UploadStage.NORMALIZED)

            path = self.resolver.resolve(asset.file_name)
            log = log.bind(path=path)
            advance(UploadStage.PATH_RESOLVED)

            await self.bootstrapper.ensure_namespace()
            advance(UploadStage.NAMESPACE_READY)

            url = await self.writer.write_object(
                path, asset.content, message=f"Upload image: {request.file_name}"
            )
            advance(UploadStage.WRITTEN)
        except UploadError as exc:
            log.warning(
                "upload_failed",
                stage=UploadStage.FAILED,
                last_stage=stage,
                kind=exc.kind,
                error=exc.message,
            )
            raise

        log.info("upload_succeeded", stage=UploadStage.SUCCEEDED, url=url, transcoded=asset.transcoded)
        return url
