import asyncio
import base64
import binascii
import hashlib
import os
from pathlib import Path

import structlog

from app.core.config import Settings
from app.integrations.storage.base import (
    Absent,
    ContentStore,
    Present,
    RemoteObjectState,
    RemoteRejected,
    RemoteStoreError,
)

logger = structlog.get_logger()


def blob_sha(data: bytes) -> str:
    header = f"blob {len(data)}\0".encode()
    return hashlib.sha1(header + data).hexdigest()


class LocalContentStore(ContentStore):
    """Directory-backed store with the same create/update rules as GitHub.

    Version tokens are git blob hashes of the current file bytes, so an
    update with a stale token is rejected exactly like the remote would.
    """

    name = "local"

    def __init__(self, settings: Settings) -> None:
        self.base_dir = Path(settings.storage_local_dir).resolve()
        self.branch = settings.github_branch
        self.public_base_url = settings.storage_public_base_url.rstrip("/")

    def resolve(self, path: str) -> Path:
        target = (self.base_dir / path).resolve()
        if not target.is_relative_to(self.base_dir):
            raise RemoteRejected("path escapes storage directory", 422)
        return target

    async def verify_access(self) -> None:
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise RemoteStoreError(f"storage directory is not writable: {exc}") from exc
        logger.info("local_storage_ready", base_dir=str(self.base_dir))

    async def get_content(self, path: str) -> RemoteObjectState:
        target = self.resolve(path)
        if target.is_dir():
            return Present()
        if not target.is_file():
            return Absent()
        data = await asyncio.to_thread(target.read_bytes)
        return Present(sha=blob_sha(data))

    async def create_or_update_content(
        self,
        path: str,
        content_b64: str,
        message: str,
        branch: str,
        sha: str | None = None,
    ) -> None:
        target = self.resolve(path)
        try:
            data = base64.b64decode(content_b64, validate=True)
        except binascii.Error as exc:
            raise RemoteRejected("content is not valid Base64", 422) from exc

        if target.is_file():
            current = blob_sha(await asyncio.to_thread(target.read_bytes))
            if not sha:
                raise RemoteRejected('"sha" wasn\'t supplied.', 422)
            if sha != current:
                raise RemoteRejected(f"{path} does not match {sha}", 409)
        elif sha:
            raise RemoteRejected(f"{path} does not exist", 404)

        await asyncio.to_thread(self._write_atomic, target, data)
        logger.info("local_object_written", path=path, message=message, branch=branch)

    @staticmethod
    def _write_atomic(target: Path, data: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        tmp = target.with_name(f".{target.name}.tmp")
        tmp.write_bytes(data)
        os.replace(tmp, target)

    def public_url(self, path: str) -> str:
        return f"{self.public_base_url}/{path}"
