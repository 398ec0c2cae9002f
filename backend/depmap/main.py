from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from depmap import __version__
from depmap.api.routes import router
from depmap.config import CORS_ORIGINS, MAX_SESSIONS, MAX_UPLOAD_MB
from depmap.planning.criticality import get_criticality_rules

app = FastAPI(
    title="Dependency Map & Migration Wave Planner",
    version=__version__,
)

# Middleware FIRST
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes AFTER middleware
app.include_router(router)


@app.get("/health")
def health():
    return {"status": "ok", "version": __version__}


@app.on_event("startup")
def startup():
    # a malformed CRITICALITY_RULES_PATH file stops startup
    rules = get_criticality_rules()
    print(f"✅ {len(rules.rules)} criticality rules loaded")
    print(f"[Main] Sessions: max {MAX_SESSIONS}, uploads up to {MAX_UPLOAD_MB} MB")
