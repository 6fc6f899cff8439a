import base64

import structlog

from app.core.exceptions import RemoteUnavailable, RemoteWriteFailed
from app.integrations.storage.base import ContentStore, Present, RemoteRejected, RemoteStoreError

logger = structlog.get_logger()


class ConditionalWriter:
    """Create-or-update of a single object, guarded by the store's version token.

    Existing objects are updated with the token read just before the write.
    If another writer changes the object in between, the store rejects the
    write and the rejection is returned to the caller as is; the write is
    never repeated with a fresh token.
    """

    def __init__(self, store: ContentStore, branch: str) -> None:
        self.store = store
        self.branch = branch

    async def current_sha(self, path: str) -> str | None:
        try:
            state = await self.store.get_content(path)
        except RemoteStoreError as exc:
            logger.error("object_check_failed", path=path, error=exc.message)
            raise RemoteUnavailable(
                f"Remote store error while checking file: {exc.message}", detail=exc.message
            ) from exc

        if isinstance(state, Present):
            logger.info("object_exists", path=path, sha=state.sha)
            return state.sha
        logger.info("object_absent", path=path)
        return None

    async def write_object(self, path: str, content: bytes, message: str) -> str:
        sha = await self.current_sha(path)
        encoded = base64.b64encode(content).decode("ascii")
        try:
            await self.store.create_or_update_content(
                path=path,
                content_b64=encoded,
                message=message,
                branch=self.branch,
                sha=sha,
            )
        except RemoteRejected as exc:
            logger.error(
                "object_write_rejected",
                path=path,
                status=exc.status_code,
                update=sha is not None,
                error=exc.message,
            )
            raise RemoteWriteFailed(f"Failed to upload image: {exc.message}", detail=exc.message) from exc
        except RemoteStoreError as exc:
            logger.error("object_write_unreachable", path=path, error=exc.message)
            raise RemoteUnavailable(
                f"Remote store unavailable during upload: {exc.message}", detail=exc.message
            ) from exc

        url = self.store.public_url(path)
        logger.info("object_written", path=path, url=url, update=sha is not None)
        return url
