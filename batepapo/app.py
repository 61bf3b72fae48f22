import logging
from typing import Any, Optional

from fastapi import Body, FastAPI, Header, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from .config import Settings, get_settings
from .errors import ChatError, ValidationError
from .messages import MessageService
from .middleware import RequestLoggerMiddleware
from .presence import PresenceTracker, Sweeper
from .sanitize import sanitize_fields
from .validation import validate_limit, validate_name

logger = logging.getLogger("batepapo.app")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s:%(lineno)d - %(message)s",
    )


def _attach(app: FastAPI, db: AsyncIOMotorDatabase, settings: Settings) -> None:
    tracker = PresenceTracker(db, settings.stale_after_ms)
    app.state.db = db
    app.state.presence = tracker
    app.state.messages = MessageService(db)
    app.state.sweeper = Sweeper(tracker, settings.sweep_interval_s)


def create_app(
    settings: Optional[Settings] = None,
    db: Optional[AsyncIOMotorDatabase] = None,
    start_sweeper: bool = True,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Bate-papo")
    app.add_middleware(RequestLoggerMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.mongo_client = None
    if db is not None:
        _attach(app, db, settings)

    @app.on_event("startup")
    async def startup_event():
        if db is None:
            app.state.mongo_client = AsyncIOMotorClient(settings.mongodb_uri)
            _attach(app, app.state.mongo_client[settings.database], settings)
            logger.info("using MongoDB database %s", settings.database)
        if start_sweeper:
            app.state.sweeper.start()

    @app.on_event("shutdown")
    async def shutdown_event():
        await app.state.sweeper.stop()
        if app.state.mongo_client is not None:
            app.state.mongo_client.close()
            app.state.mongo_client = None

    # ---- error translation ---------------------------------------------------
    @app.exception_handler(ValidationError)
    async def validation_error(request: Request, exc: ValidationError):
        return JSONResponse(exc.errors, status_code=exc.status_code)

    @app.exception_handler(ChatError)
    async def chat_error(request: Request, exc: ChatError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
        return PlainTextResponse(exc.detail, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        errors = []
        for err in exc.errors():
            loc = ".".join(str(p) for p in err.get("loc", ()))
            errors.append(f"{loc}: {err.get('msg')}")
        return JSONResponse(errors, status_code=422)

    @app.exception_handler(PyMongoError)
    async def store_error(request: Request, exc: PyMongoError):
        logger.error("store failure on %s %s", request.method, request.url.path, exc_info=exc)
        return PlainTextResponse("internal server error", status_code=500)

    # ---- routes --------------------------------------------------------------
    @app.get("/health")
    async def health():
        count = await app.state.db["participants"].count_documents({})
        return {"ok": True, "participants": count}

    @app.post("/participants", status_code=201)
    async def register(body: Any = Body(None)):
        if isinstance(body, dict):
            body = sanitize_fields(body, ("name",))
        name = validate_name(body)
        return await app.state.presence.register(name)

    @app.get("/participants")
    async def list_participants():
        return await app.state.presence.list_participants()

    @app.post("/messages", status_code=201)
    async def post_message(body: Any = Body(None), user: Optional[str] = Header(None)):
        return await app.state.messages.post(user, body)

    @app.get("/messages")
    async def get_messages(
        limit: Optional[str] = Query(None),
        user: Optional[str] = Header(None),
        user_param: Optional[str] = Query(None, alias="user"),
    ):
        n = validate_limit(limit)
        return await app.state.messages.visible_to(user if user is not None else user_param, n)

    @app.post("/status")
    async def status(user: Optional[str] = Header(None)):
        name = sanitize_fields({"name": user}, ("name",))["name"]
        await app.state.presence.heartbeat(name)
        return PlainTextResponse("OK")

    @app.delete("/messages/{message_id}")
    async def delete_message(message_id: str, user: Optional[str] = Header(None)):
        await app.state.messages.delete(message_id, user)
        return PlainTextResponse("OK")

    @app.put("/messages/{message_id}")
    async def edit_message(message_id: str, body: Any = Body(None), user: Optional[str] = Header(None)):
        return await app.state.messages.edit(message_id, user, body)

    return app
