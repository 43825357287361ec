"""FastAPI web server: JSON views of the mind + a WebSocket event feed."""

import asyncio
import logging
import time
import traceback
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from v0id.brain import Brain

logger = logging.getLogger("v0id.server")

brain: Brain | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the brain coroutine on startup, stop it on shutdown."""
    task = None
    if brain is not None:
        task = asyncio.create_task(_supervise_brain(brain))
        logger.info("Brain starting...")
    yield
    if brain is not None:
        brain.stop()
    if task is not None:
        await asyncio.wait([task], timeout=5)


app = FastAPI(title="v0id", lifespan=lifespan)


def create_app(the_brain: Brain) -> FastAPI:
    """Initialize the app with its brain. Called from main.py."""
    global brain
    brain = the_brain
    return app


async def _supervise_brain(b: Brain):
    """Supervise the brain coroutine, restart on crash with exponential backoff."""
    backoff = 5
    max_backoff = 120
    restart_count = 0

    while True:
        start = time.monotonic()
        try:
            await b.run()
            break  # clean exit (stop() was called)
        except Exception as e:
            restart_count += 1
            elapsed = time.monotonic() - start
            logger.error(f"Brain died (restart #{restart_count}, ran {elapsed:.0f}s): {e}")

            b._log_jsonl({
                "timestamp": datetime.now().isoformat(),
                "type": "coroutine_death",
                "error": str(e),
                "traceback": traceback.format_exc(),
                "tick_count": b.tick_count,
                "restart_count": restart_count,
                "backoff_seconds": backoff,
            })

            # If it ran for 5+ minutes, it was probably a transient issue
            if elapsed > 300:
                backoff = 5
                restart_count = 0

            if not b.running:
                break

            logger.info(f"Restarting in {backoff}s...")
            await asyncio.sleep(backoff)
            backoff = min(backoff * 2, max_backoff)


def _no_mind() -> JSONResponse:
    return JSONResponse({"error": "no mind running"}, status_code=404)


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- WebSocket ---

@app.websocket("/ws")
async def websocket_endpoint(ws: WebSocket):
    if brain is None:
        await ws.close(code=4004)
        return
    await ws.accept()
    brain.add_ws_client(ws)
    logger.info("WebSocket client connected")
    try:
        while True:
            await ws.receive_text()  # keep connection alive
    except WebSocketDisconnect:
        brain.remove_ws_client(ws)
        logger.info("WebSocket client disconnected")


# --- REST API ---

@app.get("/api/status")
async def get_status():
    if brain is None:
        return _no_mind()
    return brain.status()


@app.get("/api/thought")
async def get_thought():
    if brain is None:
        return _no_mind()
    return {"thought": brain.state.thought, "mode": brain.state.mode,
            "last_error": brain.gateway.last_error}


@app.get("/api/memories")
async def get_memories():
    if brain is None:
        return _no_mind()
    return brain.state.memories.to_list()


@app.get("/api/emotions")
async def get_emotions():
    if brain is None:
        return _no_mind()
    return {
        "weights": brain.state.emotions.as_dict(),
        "dominant": brain.state.emotions.dominant_label(),
    }


@app.get("/api/beliefs")
async def get_beliefs():
    if brain is None:
        return _no_mind()
    s = brain.state
    return {
        "beliefs": [b.to_dict() for b in s.beliefs],
        "conflicts": s.conflicts,
        "open_questions": s.open_questions,
        "insights": s.insights[-10:],
    }


@app.get("/api/self")
async def get_self():
    if brain is None:
        return _no_mind()
    s = brain.state
    return {
        "self_model": s.self_model.to_dict(),
        "attention": s.attention,
        "environment": s.environment,
        "sub_agent": s.sub_agent.name if s.sub_agent else None,
    }


@app.get("/api/concepts")
async def get_concepts(limit: int = 50):
    if brain is None:
        return _no_mind()
    graph = brain.state.concepts
    limit = max(0, limit)
    recent = graph.nodes()[-limit:] if limit else []
    return {
        "node_count": len(graph),
        "edge_count": graph.edge_count(),
        "nodes": {word: sorted(graph[word]) for word in recent},
    }


@app.get("/api/events")
async def get_events(limit: int = 100):
    if brain is None:
        return _no_mind()
    limit = max(0, limit)
    return brain.events[-limit:] if limit else []


@app.post("/api/topic")
async def post_topic(request: Request):
    """Ask the mind to think about something else on its next tick."""
    if brain is None:
        return _no_mind()
    body = await request.json()
    topic = str(body.get("topic", "")).strip()
    if not topic:
        return {"ok": False, "error": "topic is required"}
    brain.request_topic(topic)
    brain.wake()
    return {"ok": True, "topic": topic}
