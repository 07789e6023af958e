import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from app.api.exceptions import register_error_handler
from app.api.v1.routes import auth, events, booking, users
from app.core.middleware.http_ctx import HttpContextMiddleware
from app.core.redis import create_redis, close_redis

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.redis = await create_redis()
    try:
        yield
    finally:
        await close_redis(app.state.redis)


app = FastAPI(title="Park Tickets", lifespan=lifespan)
app.add_middleware(HttpContextMiddleware, request_id_header="X-Request-ID")
register_error_handler(app)

for router in (auth.router, events.router, booking.router, users.router):
    app.include_router(router)
