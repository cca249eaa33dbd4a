# -*- coding: utf-8 -*-
"""
NodePerson 健康会话 API

呼吸会话控制、实时快照推送、连续天数与每日进度查询。
"""

from __future__ import annotations

import os
from typing import Optional

from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware

from .breathing.api import router as breathing_router
from .config import settings
from .progress.api import router as progress_router
from .realtime.websocket import stream_manager, websocket_endpoint

# 创建应用
app = FastAPI(
    title="NodePerson Wellness",
    description="Guided breathing sessions, streaks and daily progress",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def _startup_ticker() -> None:
    stream_manager.ticker.start()


@app.on_event("shutdown")
async def _shutdown_ticker() -> None:
    await stream_manager.ticker.stop()


app.include_router(breathing_router)
app.include_router(progress_router)


@app.get("/api/health")
def health() -> dict:
    return {"ok": True}


@app.websocket("/ws/breathing")
async def breathing_ws(websocket: WebSocket, connection_id: Optional[str] = None):
    await websocket_endpoint(websocket, connection_id)


def run() -> None:
    """Console entry point (used by pyproject [project.scripts])."""
    import uvicorn

    host = os.environ.get("NODEPERSON_HOST") or os.environ.get("HOST") or "127.0.0.1"
    port_raw = os.environ.get("NODEPERSON_PORT") or os.environ.get("PORT") or "8000"
    try:
        port = int(port_raw)
    except ValueError:
        port = 8000

    uvicorn.run("nodeperson.api:app", host=host, port=port, reload=False)
