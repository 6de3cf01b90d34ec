from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from dataclasses import asdict
from typing import Any, Dict, Literal, Optional, Set

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from simulation import ElevatorControlService, InvalidArgument, SystemConfig

logger = logging.getLogger(__name__)


class CallRequest(BaseModel):
    floor: int
    direction: Literal["up", "down"]


class DispatcherSelection(BaseModel):
    name: str
    options: Dict[str, Any] = {}


class SimulationManager:
    """Drives the control loop on a fixed cadence and serialises access to it."""

    def __init__(self, config: Optional[SystemConfig] = None) -> None:
        self.service = ElevatorControlService(config)
        self.config = self.service.config
        self.tick_interval = self.config.tick_interval_s
        self.clients: Set[WebSocket] = set()
        self._since_random_call = 0.0
        self._task: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()

    async def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run())
            logger.info("Tick loop started with a %.2fs interval", self.tick_interval)

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
            logger.info("Tick loop stopped")

    async def _run(self) -> None:
        while True:
            async with self._lock:
                self.advance()
                payload = self.current_state()
            await self.broadcast(payload)
            await asyncio.sleep(self.tick_interval)

    def advance(self) -> None:
        """Run one tick and, while the simulation flag is set, maybe add a random call."""
        self.service.step(self.tick_interval)
        if not self.service.is_running:
            self._since_random_call = 0.0
            return
        self._since_random_call += self.tick_interval
        if self._since_random_call >= self.config.random_call_interval_s:
            self._since_random_call = 0.0
            if self.service.factory.random.random() < self.config.random_call_probability:
                self.service.generate_random_call()

    async def broadcast(self, payload: dict) -> None:
        message = json.dumps(payload)
        disconnected: Set[WebSocket] = set()
        for client in set(self.clients):
            try:
                await client.send_text(message)
            except WebSocketDisconnect:
                disconnected.add(client)
        for client in disconnected:
            await self.unregister(client)

    async def register(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.clients.add(websocket)
        await websocket.send_text(json.dumps(self.current_state()))

    async def unregister(self, websocket: WebSocket) -> None:
        if websocket in self.clients:
            self.clients.remove(websocket)
        with contextlib.suppress(Exception):
            await websocket.close()

    def current_state(self) -> dict:
        state = self.service.get_state().to_dict()
        state["metrics"] = asdict(self.service.get_metrics())
        state["dispatcher"] = self.service.dispatcher_name
        return state

    async def state(self) -> dict:
        async with self._lock:
            return self.current_state()

    async def metrics(self) -> dict:
        async with self._lock:
            return asdict(self.service.get_metrics())

    async def add_call(self, floor: int, direction: str) -> dict:
        async with self._lock:
            call = self.service.add_call(floor, direction)
            state = self.current_state()
            state["call_id"] = call.call_id
            return state

    async def random_call(self) -> dict:
        async with self._lock:
            call = self.service.generate_random_call()
            state = self.current_state()
            state["call_id"] = call.call_id
            return state

    async def toggle(self) -> dict:
        async with self._lock:
            self.service.toggle_simulation()
            return self.current_state()

    async def clear_logs(self) -> dict:
        async with self._lock:
            self.service.clear_logs()
            return self.current_state()

    async def set_dispatcher(self, name: str, options: Dict[str, Any]) -> dict:
        async with self._lock:
            self.service.set_dispatcher(name, **options)
            return self.current_state()


def create_app(manager: Optional[SimulationManager] = None) -> FastAPI:
    manager = manager or SimulationManager()
    app = FastAPI(title="Elevator Bank Control API")
    app.state.manager = manager
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    async def on_startup() -> None:
        await manager.start()

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        await manager.stop()

    @app.get("/state")
    async def get_state() -> dict:
        return await manager.state()

    @app.get("/metrics")
    async def get_metrics() -> dict:
        return await manager.metrics()

    @app.post("/calls")
    async def add_call(request: CallRequest) -> dict:
        try:
            return await manager.add_call(request.floor, request.direction)
        except InvalidArgument as exc:
            raise HTTPException(status_code=400, detail=str(exc))

    @app.post("/calls/random")
    async def random_call() -> dict:
        return await manager.random_call()

    @app.post("/simulation/toggle")
    async def toggle_simulation() -> dict:
        return await manager.toggle()

    @app.delete("/logs")
    async def clear_logs() -> dict:
        return await manager.clear_logs()

    @app.post("/dispatcher")
    async def set_dispatcher(selection: DispatcherSelection) -> dict:
        try:
            return await manager.set_dispatcher(selection.name, selection.options)
        except (TypeError, ValueError) as exc:
            raise HTTPException(status_code=400, detail=str(exc))

    @app.websocket("/ws/stream")
    async def websocket_endpoint(websocket: WebSocket) -> None:
        await manager.register(websocket)
        try:
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            await manager.unregister(websocket)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run("server.app:app", host="0.0.0.0", port=8000, reload=False)
