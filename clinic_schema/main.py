from __future__ import annotations

import sys
from contextlib import asynccontextmanager
from typing import Any, Dict, List

from fastapi import FastAPI
from starlette.responses import HTMLResponse, JSONResponse, Response

from clinic_schema.db import close_db, init_db
from clinic_schema.web.routers import admin_settings, saved, schema, sessions

APP_NAME = "clinic-schema-gen"

def route_table(app: FastAPI) -> List[Dict[str, Any]]:
    # read from the OpenAPI document: included routers are not always flattened
    # into app.router.routes
    paths = app.openapi().get("paths", {})
    return [{"path": p, "methods": sorted(m.upper() for m in ops)} for p, ops in sorted(paths.items())]

@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    print("[ROUTES at startup]\n" + "\n".join(
        f"{','.join(r['methods'])} {r['path']}" for r in route_table(app)
    ), file=sys.stderr)
    yield
    await close_db()

app = FastAPI(title=f"{APP_NAME} API", version="1.0.0", lifespan=lifespan)

loaded = []
for mod, prefix in [
    (schema, "/api"),
    (sessions, "/api"),
    (saved, "/api"),
    (admin_settings, "/admin"),
]:
    app.include_router(mod.router, prefix=prefix)
    loaded.append(mod.__name__)

print(f"[INFO] Mounted routers: {loaded}", file=sys.stderr)

@app.get("/favicon.ico")
async def favicon():
    return Response(status_code=204)

@app.get("/__routes")
async def __routes():
    return JSONResponse(route_table(app))

@app.get("/", response_class=HTMLResponse)
async def index():
    return HTMLResponse(
        "<h3>Clinic Schema Gen</h3>"
        "<p>Start a session with <code>POST /api/sessions</code> "
        "(<code>{\"entity\": \"clinic\", \"arity\": \"single\"}</code>), edit it through "
        "<code>/api/sessions/{id}/mutations</code> and download the JSON-LD from "
        "<code>/api/sessions/{id}/export</code>. See <a href=\"/docs\">/docs</a>.</p>"
    )
