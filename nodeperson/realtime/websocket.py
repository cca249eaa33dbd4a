# -*- coding: utf-8 -*-
"""
实时 WebSocket 模块

向渲染端推送呼吸会话快照，并接收会话控制指令。
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable, Dict, Optional
from uuid import uuid4

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from ..breathing.engine import BreathingSessionEngine
from ..breathing.models import BreathingSnapshot, ControlMessage
from ..breathing.patterns import InvalidPatternError, UnknownPatternError
from ..breathing.service import UnknownCanvasError, apply_control, engine
from .ticker import SessionTicker

logger = logging.getLogger(__name__)

_QUEUE_SIZE = 64


class BreathingStreamManager:
    """实时会话管理器"""

    def __init__(self, engine: BreathingSessionEngine, ticker: Optional[SessionTicker] = None):
        self.engine = engine
        self.ticker = ticker or SessionTicker(engine)
        # 活跃连接
        self.active_connections: Dict[str, WebSocket] = {}
        # 每个连接的推送任务与取消订阅句柄
        self.sender_tasks: Dict[str, asyncio.Task] = {}
        self.unsubscribers: Dict[str, Callable[[], None]] = {}
        self.send_locks: Dict[str, asyncio.Lock] = {}

    async def connect(self, websocket: WebSocket, connection_id: Optional[str] = None) -> str:
        """
        建立 WebSocket 连接并订阅引擎快照

        Returns:
            str: 连接 ID
        """
        await websocket.accept()
        if not connection_id:
            connection_id = str(uuid4())
        self.active_connections[connection_id] = websocket
        self.send_locks[connection_id] = asyncio.Lock()

        loop = asyncio.get_running_loop()
        queue: asyncio.Queue = asyncio.Queue(maxsize=_QUEUE_SIZE)

        def _enqueue(snapshot: BreathingSnapshot) -> None:
            if queue.full():
                # Renderer is behind; only the latest state matters.
                queue.get_nowait()
            queue.put_nowait(snapshot)

        def _listener(snapshot: BreathingSnapshot) -> None:
            loop.call_soon_threadsafe(_enqueue, snapshot)

        self.unsubscribers[connection_id] = self.engine.subscribe(_listener)
        self.sender_tasks[connection_id] = asyncio.create_task(self._pump(connection_id, queue))

        logger.info("WebSocket connected: %s", connection_id)
        await self._send_message(connection_id, {
            "type": "connected",
            "connection_id": connection_id,
            "timestamp": datetime.now().isoformat(),
            "snapshot": self.engine.snapshot().model_dump(mode="json"),
        })
        return connection_id

    def disconnect(self, connection_id: str) -> None:
        """断开连接"""
        self.active_connections.pop(connection_id, None)
        self.send_locks.pop(connection_id, None)
        unsubscribe = self.unsubscribers.pop(connection_id, None)
        if unsubscribe is not None:
            unsubscribe()
        task = self.sender_tasks.pop(connection_id, None)
        if task is not None:
            task.cancel()
        logger.info("WebSocket disconnected: %s", connection_id)

    def process_control(self, data: dict) -> dict:
        """处理控制指令，返回响应消息"""
        try:
            message = ControlMessage.model_validate(data)
        except ValidationError as exc:
            return {"type": "error", "message": f"Invalid control message: {exc.errors()[:1]}"}
        try:
            snapshot = apply_control(
                self.engine,
                message.action,
                pattern_id=message.pattern_id,
                canvas=message.canvas,
            )
        except UnknownPatternError as exc:
            return {"type": "error", "message": f"Unknown pattern: {exc.args[0]}"}
        except UnknownCanvasError as exc:
            return {"type": "error", "message": f"Unknown canvas: {exc.args[0]}"}
        except InvalidPatternError as exc:
            return {"type": "error", "message": str(exc)}
        return {"type": "ack", "action": message.action, "snapshot": snapshot.model_dump(mode="json")}

    async def _pump(self, connection_id: str, queue: asyncio.Queue) -> None:
        try:
            while connection_id in self.active_connections:
                snapshot: BreathingSnapshot = await queue.get()
                await self._send_message(connection_id, {
                    "type": "snapshot",
                    "snapshot": snapshot.model_dump(mode="json"),
                })
        except asyncio.CancelledError:
            pass
        except Exception as exc:
            logger.error("Snapshot push failed for %s: %s", connection_id, exc)

    async def _send_message(self, connection_id: str, message: dict) -> None:
        """发送消息"""
        websocket = self.active_connections.get(connection_id)
        lock = self.send_locks.get(connection_id)
        if websocket is None or lock is None:
            return
        async with lock:
            await websocket.send_json(message)


# 全局管理器实例
stream_manager = BreathingStreamManager(engine)


async def websocket_endpoint(websocket: WebSocket, connection_id: Optional[str] = None):
    """WebSocket 端点处理函数"""
    cid = await stream_manager.connect(websocket, connection_id)

    try:
        while True:
            data = await websocket.receive_json()
            result = stream_manager.process_control(data)
            await stream_manager._send_message(cid, result)

    except WebSocketDisconnect:
        stream_manager.disconnect(cid)
    except Exception as e:
        logger.error(f"WebSocket error: {e}")
        stream_manager.disconnect(cid)
