import asyncio

import httpx
import structlog

logger = structlog.get_logger()


class KeepAlivePinger:
    def __init__(self, url: str, interval_seconds: int, timeout: float = 10.0) -> None:
        self.url = url
        self.interval_seconds = interval_seconds
        self.timeout = timeout
        self._task: asyncio.Task | None = None

    async def ping(self) -> bool:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.url)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("keepalive_failed", url=self.url, error=str(exc))
            return False
        if response.is_error:
            logger.warning("keepalive_failed", url=self.url, status=response.status_code)
            return False
        logger.debug("keepalive_ok", url=self.url, status=response.status_code)
        return True

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            await self.ping()

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run(), name="keepalive")
            logger.info("keepalive_started", url=self.url, interval=self.interval_seconds)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
