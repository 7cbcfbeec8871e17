import os

import sentry_sdk
import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from container_counter import models  # noqa: F401  (registers tables on Base)
from container_counter.database import Base, create_db_engine, create_session_factory, DATABASE_URL
from container_counter.logging_config import setup_logging
from container_counter.middleware import RequestLoggingMiddleware
from container_counter.ratelimit import limiter
from container_counter.routes import containers, parse, sessions
from container_counter.sessions import SessionRegistry
from container_counter.store import ContainerStore

load_dotenv()

# Sentry
sentry_dsn = os.getenv("SENTRY_DSN")
if sentry_dsn:
    sentry_sdk.init(
        dsn=sentry_dsn,
        traces_sample_rate=0.1,
        send_default_pii=False,
    )

logger = setup_logging()


def create_app(database_url: str | None = None) -> FastAPI:
    app = FastAPI(title="Container Counter API", version="0.1.0")
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # CORS
    origins = os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in origins],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    # Each app owns its storage and live sessions
    engine = create_db_engine(database_url or DATABASE_URL)
    Base.metadata.create_all(bind=engine)
    app.state.store = ContainerStore(create_session_factory(engine))
    app.state.sessions = SessionRegistry()

    # Routes
    app.include_router(parse.router, prefix="/api")
    app.include_router(containers.router, prefix="/api")
    app.include_router(sessions.router, prefix="/api")

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "4318")))
