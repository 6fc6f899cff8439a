from dataclasses import dataclass


@dataclass(frozen=True)
class Present:
    sha: str | None = None


@dataclass(frozen=True)
class Absent:
    pass


RemoteObjectState = Present | Absent


class RemoteStoreError(Exception):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class RemoteRejected(RemoteStoreError):
    pass


class ContentStore:
    name: str = "base"
    branch: str = ""

    async def verify_access(self) -> None:
        raise NotImplementedError

    async def get_content(self, path: str) -> RemoteObjectState:
        raise NotImplementedError

    async def create_or_update_content(
        self,
        path: str,
        content_b64: str,
        message: str,
        branch: str,
        sha: str | None = None,
    ) -> None:
        raise NotImplementedError

    def public_url(self, path: str) -> str:
        raise NotImplementedError

    async def aclose(self) -> None:
        return None
