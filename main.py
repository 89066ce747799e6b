from fastapi import Depends, FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
import itertools
import json
import logging
from datetime import datetime

from app.config.settings import settings
from app.database import get_store, init_store, notifier
from app.routers import competency, department, hierarchy, pdi, team, user
from app.services.websocket_manager import websocket_manager
from app.store import RelationalStore
from seed_all import build_seed

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Performance Management Demo API")

# Store toasts are pushed to every WebSocket client
websocket_manager.attach(notifier)

# Anonymous WebSocket client ids
_client_ids = itertools.count(1)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Route registration
app.include_router(user.router, prefix="/api/users", tags=["Users"])
app.include_router(team.router, prefix="/api/teams", tags=["Teams"])
app.include_router(department.router, prefix="/api/departments", tags=["Departments"])
app.include_router(competency.router, prefix="/api/competencies", tags=["Competencies"])
app.include_router(pdi.router, prefix="/api/pdi", tags=["PDI"])
app.include_router(hierarchy.router, prefix="/api/hierarchy", tags=["Hierarchy"])

# Startup event
@app.on_event("startup")
async def startup_event():
    """Load (or seed) the relational store when the application starts"""
    logger.info("Starting demo-mode API...")
    store = init_store(seed=build_seed())
    violations = store.check_invariants()
    if violations:
        logger.warning(f"Stored data breaks {len(violations)} relationship invariants: {violations}")

# Root route
@app.get("/")
def read_root():
    return {"message": "Performance Management Demo API"}

@app.get("/health")
def health(store: RelationalStore = Depends(get_store)):
    return {
        "status": "ok",
        "users": len(store.users),
        "teams": len(store.teams),
        "departments": len(store.departments),
        "websocket_connections": websocket_manager.get_total_connections()
    }

# WebSocket endpoint streaming store toasts
@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket, client_id: str = None):
    await websocket.accept()

    client_id = client_id or f"anonymous-{next(_client_ids)}"
    await websocket_manager.connect(websocket, client_id)

    try:
        while True:
            data = await websocket.receive_text()

            # Try to parse as JSON, if it fails, treat as plain text
            try:
                received_data = json.loads(data)
            except json.JSONDecodeError:
                continue

            if not isinstance(received_data, dict):
                continue

            if received_data.get("type") == "ping":
                await websocket_manager.send_personal_message(
                    {"type": "pong", "timestamp": datetime.now().isoformat()},
                    websocket
                )
            elif received_data.get("type") == "get_clients":
                # Send list of connected clients
                clients = websocket_manager.get_connected_clients()
                await websocket_manager.send_personal_message(
                    {
                        "type": "clients_list",
                        "clients": clients,
                        "total_count": len(clients),
                        "timestamp": datetime.now().isoformat()
                    },
                    websocket
                )

    except WebSocketDisconnect:
        websocket_manager.disconnect(websocket, client_id)
