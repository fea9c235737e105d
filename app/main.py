import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from app.config.settings import settings
from app.core.auth_context import auth_context
from app.database.store import SupabaseStore, StoreError
from app.database.supabase_client import get_supabase
from app.modules.auth import routes as auth_routes
from app.modules.projects import routes as projects_routes
from app.modules.comments import routes as comments_routes
from app.modules.profiles import routes as profiles_routes
from app.modules.profiles.bootstrap import make_profile_bootstrapper

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])
app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(StoreError)
async def store_exception_handler(request: Request, exc: StoreError):
    logger.error("Backing store error on %s: %s", request.url.path, exc.message)
    return JSONResponse(status_code=502, content={"detail": exc.message})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    if settings.is_production:
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
    return JSONResponse(status_code=500, content={"detail": str(exc)})


class SecurityHeadersMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"].extend([
                    (b"X-Content-Type-Options", b"nosniff"),
                    (b"X-Frame-Options", b"DENY"),
                    (b"X-XSS-Protection", b"1; mode=block"),
                ])
            await send(message)

        await self.app(scope, receive, send_with_headers)


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include module routes
app.include_router(auth_routes.router, prefix="/api/v1")
app.include_router(projects_routes.router, prefix="/api/v1")
app.include_router(comments_routes.router, prefix="/api/v1")
app.include_router(profiles_routes.router, prefix="/api/v1")

_remove_profile_listener = None


@app.on_event("startup")
async def startup_event():
    global _remove_profile_listener
    logger.info("Application startup")
    if not settings.supabase_configured:
        logger.warning("SUPABASE_URL/SUPABASE_KEY not set; auth context not started")
        return
    _remove_profile_listener = auth_context.add_listener(
        make_profile_bootstrapper(lambda: SupabaseStore(get_supabase()))
    )
    auth_context.init()


@app.on_event("shutdown")
async def shutdown_event():
    global _remove_profile_listener
    if _remove_profile_listener is not None:
        _remove_profile_listener()
        _remove_profile_listener = None
    auth_context.teardown()
    logger.info("Application shutdown")


@app.get("/")
async def root():
    return {"message": "Welcome to projecthub-backend", "status": "healthy"}


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready():
    """Readiness probe: the service is only useful once Supabase is configured."""
    if not settings.supabase_configured:
        return JSONResponse(status_code=503, content={"status": "not ready", "detail": "Supabase not configured"})
    return {"status": "ready"}
