from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from config.settings import settings

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
# quiet HTTP client debug logs
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)


# ✅ middlewares
from middlewares.timing import TimingMiddleware
from middlewares.error_handler import add_error_handlers

# ✅ routers
from routers import (
    admin, attendance, attendees, auth, meta,
    program, register, token_check, verify,
)

app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
)

# ✅ CORS (front end on another origin)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ✅ latency header + access log (X-Latency-Ms)
app.add_middleware(TimingMiddleware)

# ✅ global error handlers (one JSON error envelope)
add_error_handlers(app)

# ✅ /api prefix; signed QR links point at /api/verify
app.include_router(verify.router,       prefix="/api")
app.include_router(token_check.router,  prefix="/api")
app.include_router(register.router,     prefix="/api")
app.include_router(attendees.router,    prefix="/api")
app.include_router(attendance.router,   prefix="/api")
app.include_router(admin.router,        prefix="/api")
app.include_router(auth.router,         prefix="/api")
app.include_router(program.router,      prefix="/api")
app.include_router(meta.router,         prefix="/api")


# ✅ health check
@app.get("/health")
def health_check():
    return {"status": "ok", "message": "API is running"}


# ✅ root
@app.get("/")
def root():
    return {"message": settings.APP_TITLE}
