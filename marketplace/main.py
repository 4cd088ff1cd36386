from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.middleware.cors import CORSMiddleware

from marketplace.api.v1 import api_router
from marketplace.api.v1.exception_handlers import register_exception_handlers
from marketplace.core.config import settings
from marketplace.middlewares.logging_middleware import LoggingMiddleware
from marketplace.middlewares.rate_limit import limiter
from marketplace.utils.logger import configure_logging, get_logger


configure_logging()
logger = get_logger("main")

app = FastAPI(title="Services Marketplace API", debug=settings.debug)

allowed_origins = settings.allowed_hosts_list or [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:8000",
    "http://127.0.0.1:8000",
]
logger.info(f"CORS allowed origins: {allowed_origins}")
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# 1) SlowAPI rate limiting
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

# 2) Request logging
app.add_middleware(LoggingMiddleware)

register_exception_handlers(app)
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Prometheus instrumentation
Instrumentator().instrument(app).expose(app)

app.include_router(api_router, prefix="/api/v1")


@app.get("/health")
async def health():
    return {"status": "healthy", "message": "Backend is running"}


@app.get("/")
async def root():
    return {"message": "Services Marketplace API"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
