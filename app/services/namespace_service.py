import base64

import structlog

from app.core.constants import SENTINEL_CONTENT, SENTINEL_FILE_NAME
from app.core.exceptions import NamespaceCreateFailed, RemoteUnavailable
from app.integrations.storage.base import Absent, ContentStore, RemoteRejected, RemoteStoreError

logger = structlog.get_logger()


class NamespaceBootstrapper:
    """Makes sure the upload directory exists in the store.

    Git has no empty directories, so a missing namespace is created by
    committing a README into it. The lookup and the create are separate
    calls with nothing holding them together: two first-time uploads can
    both see the directory missing and both try to create the README. The
    loser's create fails and that upload returns 500.
    """

    def __init__(self, store: ContentStore, namespace: str) -> None:
        self.store = store
        self.namespace = namespace.strip("/")
        self.verified = False

    @property
    def sentinel_path(self) -> str:
        return f"{self.namespace}/{SENTINEL_FILE_NAME}"

    async def ensure_namespace(self) -> None:
        if self.verified:
            return

        try:
            state = await self.store.get_content(self.namespace)
        except RemoteStoreError as exc:
            logger.error("namespace_check_failed", namespace=self.namespace, error=exc.message)
            raise RemoteUnavailable(
                f"Remote store error while checking {self.namespace} folder: {exc.message}",
                detail=exc.message,
            ) from exc

        if isinstance(state, Absent):
            logger.info("namespace_missing", namespace=self.namespace)
            await self._create_sentinel()

        self.verified = True

    async def _create_sentinel(self) -> None:
        content = base64.b64encode(SENTINEL_CONTENT.encode()).decode("ascii")
        try:
            await self.store.create_or_update_content(
                path=self.sentinel_path,
                content_b64=content,
                message=f"Create {self.namespace} directory",
                branch=self.store.branch,
            )
        except RemoteRejected as exc:
            logger.error("namespace_create_failed", path=self.sentinel_path, error=exc.message)
            raise NamespaceCreateFailed(
                f"Failed to create {self.namespace} directory: {exc.message}", detail=exc.message
            ) from exc
        except RemoteStoreError as exc:
            logger.error("namespace_create_unreachable", path=self.sentinel_path, error=exc.message)
            raise RemoteUnavailable(
                f"Remote store unavailable while creating {self.namespace} directory: {exc.message}",
                detail=exc.message,
            ) from exc
        logger.info("namespace_created", path=self.sentinel_path)
