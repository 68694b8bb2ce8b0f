import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from padel_league.database import init_db
from padel_league.routes import attendance, draws, events, scores

app = FastAPI(title="Padel League Weekly Events API")

_cors_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
_extra = os.getenv("CORS_ORIGINS", "")
if _extra:
    _cors_origins.extend(o.strip() for o in _extra.split(",") if o.strip())

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(events.router, prefix="/api", tags=["events"])
app.include_router(attendance.router, prefix="/api", tags=["attendance"])
app.include_router(draws.router, prefix="/api", tags=["draws"])
app.include_router(scores.router, prefix="/api", tags=["scores"])


@app.on_event("startup")
def on_startup():
    init_db()  # Use centralized init_db() which imports models and creates tables


@app.get("/api/health")
def health_check():
    return {"app_name": "Padel League Weekly Events API", "status": "healthy"}
