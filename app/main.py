import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, WebSocket, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app import config, database
from app.database import get_db
from app.exceptions import LeaderboardError, ValidationError
from app.analytics.routes import router as analytics_router
from app.games.routes import router as games_router
from app.leaderboard.routes import router as leaderboard_router
from app.players.routes import router as players_router
from app.websockets.leaderboard import leaderboard_websocket_endpoint

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await database.init_models()
    yield
    await database.dispose_engine()


app = FastAPI(title="Poker Leaderboard 🃏", lifespan=lifespan)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LeaderboardError)
async def leaderboard_error_handler(request: Request, exc: LeaderboardError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.user_message})


def _is_missing(err: dict) -> bool:
    return err.get("type") in ("missing", "string_too_short") or err.get("input") is None


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if not errors or any(_is_missing(err) for err in errors):
        message = "All fields are required"
    else:
        err = errors[0]
        field = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        message = f"{field}: {err.get('msg')}" if field else err.get("msg")
    logger.info("Rejected request to %s: %s", request.url.path, message)
    return await leaderboard_error_handler(request, ValidationError(str(errors), message))


# Incluir rutas
app.include_router(players_router, prefix="/api/players", tags=["Players"])
app.include_router(games_router, prefix="/api", tags=["Games"])
app.include_router(leaderboard_router, prefix="/api/leaderboard", tags=["Leaderboard"])
app.include_router(analytics_router, prefix="/api", tags=["Analytics"])


#ws
@app.websocket("/ws/leaderboard")
async def ws_leaderboard(websocket: WebSocket, db: AsyncSession = Depends(get_db)):
    await leaderboard_websocket_endpoint(websocket, db)
