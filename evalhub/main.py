import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.openapi.utils import get_openapi

from evalhub.shared.config import settings
from evalhub.shared.db import Base, engine
from evalhub.shared.logs import setup_logging

# import models so they register with Base.metadata
from evalhub.auth import models as auth_models  # noqa: F401
from evalhub.profiles import models as profiles_models  # noqa: F401
from evalhub.tasks import models as tasks_models  # noqa: F401
from evalhub.evaluations import models as evaluations_models  # noqa: F401
from evalhub.payments import models as payments_models  # noqa: F401

# Routers Import
from evalhub.auth.api import router as auth_router
from evalhub.profiles.api import router as profiles_router
from evalhub.tasks.api import router as tasks_router
from evalhub.evaluations.api import router as evaluations_router
from evalhub.payments.api import router as payments_router

setup_logging()
logger = logging.getLogger(__name__)

TAGS_METADATA = [
    {"name": "Auth", "description": "Register, log in, inspect the current identity"},
    {"name": "Profile", "description": "Profile, plans and plan upgrades"},
    {"name": "Tasks", "description": "Submit coding tasks, dashboard listing and live status"},
    {"name": "Evaluations", "description": "AI evaluations and report access"},
    {"name": "Payments", "description": "Report unlock checkout and the Stripe webhook"},
    {"name": "Health", "description": "Service health"},
]

# routes reachable without a bearer token
PUBLIC_PATHS = {"/auth/token", "/auth/register", "/healthz", "/payments/webhook"}

app = FastAPI(
    title="EvalHub",
    version="0.1.0",
    description="Submit coding tasks, get AI evaluations, unlock detailed reports.",
    openapi_tags=TAGS_METADATA,
)

@app.exception_handler(Exception)
async def _unhandled(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    if settings.ENV == "dev":
        # shows the real error in Swagger while developing
        return JSONResponse(status_code=500, content={"detail": str(exc)})
    return JSONResponse(status_code=500, content={"ok": False, "error": {"code": "internal_error", "message": "Internal server error"}})

@app.on_event("startup")
def _init_db():
    Base.metadata.create_all(bind=engine)
    logger.info("EvalHub started (env=%s, llm=%s, payments=%s)", settings.ENV, settings.LLM_PROVIDER, settings.PAYMENT_MODE)

@app.get("/healthz", tags=["Health"])
def healthz():
    return {"ok": True}

# --- Custom OpenAPI: bearerAuth as the default for every non-public route ---
def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )
    schema.setdefault("components", {}).setdefault("securitySchemes", {})
    schema["components"]["securitySchemes"]["bearerAuth"] = {
        "type": "http",
        "scheme": "bearer",
        "bearerFormat": "JWT",
    }
    for path, ops in schema.get("paths", {}).items():
        if path in PUBLIC_PATHS:
            continue
        for op in ops.values():
            op.setdefault("security", [{"bearerAuth": []}])
    app.openapi_schema = schema
    return app.openapi_schema

# Routers
app.include_router(auth_router)
app.include_router(profiles_router)
app.include_router(tasks_router)
app.include_router(evaluations_router)
app.include_router(payments_router)

app.openapi = custom_openapi
