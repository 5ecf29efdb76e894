"""
Range 対応のストリーミングレスポンス。

DeliveryPlan が示すバイト範囲だけをチャンク単位で送信する。ファイルハンドルは
送信コルーチンのスコープに閉じており、正常終了・I/O エラー・クライアント切断の
いずれでも確実に閉じられる。
"""
from functools import partial

import anyio
from starlette.responses import JSONResponse, Response
from starlette.types import Receive, Scope, Send

from app.services.resource_locator import MediaResource
from domain.services.range_negotiator import DeliveryPlan
from utils.logger import get_logger

logger = get_logger(__name__)


class MediaStreamResponse(Response):
    def __init__(self, plan: DeliveryPlan, resource: MediaResource, chunk_size: int):
        self.plan = plan
        self.resource = resource
        self.chunk_size = chunk_size
        self.status_code = plan.status
        self.media_type = resource.media_type
        self.background = None

        headers = {
            "Content-Length": str(plan.length),
            "Accept-Ranges": "bytes",
        }
        if plan.is_partial:
            headers["Content-Range"] = plan.content_range
        self.init_headers(headers)
        self._completed = False

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            handle = await anyio.open_file(self.resource.path, "rb")
        except OSError as e:
            # locate 後にファイルが消えた場合。ヘッダー送信前なので 404 を返せる
            logger.warning(f"Media file vanished before streaming: {self.resource.path} ({e})")
            await JSONResponse({"detail": "Audio file not found"}, status_code=404)(scope, receive, send)
            return

        async with handle:
            async with anyio.create_task_group() as task_group:
                async def wrap(func):
                    await func()
                    task_group.cancel_scope.cancel()

                task_group.start_soon(wrap, partial(self.stream_response, handle, send))
                await wrap(partial(self.listen_for_disconnect, receive))

        if not self._completed:
            logger.info(f"Stream of {self.resource.path} ended early ({self.plan.content_range})")

    async def listen_for_disconnect(self, receive: Receive) -> None:
        while True:
            message = await receive()
            if message["type"] == "http.disconnect":
                break

    async def stream_response(self, handle, send: Send) -> None:
        await send({
            "type": "http.response.start",
            "status": self.status_code,
            "headers": self.raw_headers,
        })

        if self.plan.length == 0:
            await send({"type": "http.response.body", "body": b"", "more_body": False})
            self._completed = True
            return

        remaining = self.plan.length
        try:
            await handle.seek(self.plan.start)
            while remaining > 0:
                chunk = await handle.read(min(self.chunk_size, remaining))
                if not chunk:
                    # ファイルが途中で短くなった。送信済みの分で打ち切る
                    logger.warning(f"Unexpected end of {self.resource.path} with {remaining} bytes left")
                    return
                remaining -= len(chunk)
                await send({"type": "http.response.body", "body": chunk, "more_body": remaining > 0})
        except OSError as e:
            # 書き込み失敗 (クライアント切断) または読み込み失敗
            logger.info(f"Stream aborted for {self.resource.path}: {e}")
            return

        self._completed = True
