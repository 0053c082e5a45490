"""
Recipeshare - FastAPI + Socket.IO host for the following and recipe views
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import socketio

from recipeshare.config import settings
from recipeshare.database.db import init_db
from recipeshare.logging import setup_logging, get_logger
from recipeshare.realtime import RealtimeGateway
from recipeshare.routers import following, recipes, users
from recipeshare.services.recipes import RecipeService
from recipeshare.services.relation_backend import RelationBackend
from recipeshare.services.search import SearchAdapter
from recipeshare.services.search_index import SqliteSearchIndex
from recipeshare.services.users import UserDirectory

logger = get_logger('main')

# Socket.IO server for the per-connection views
sio = socketio.AsyncServer(
    async_mode='asgi',
    cors_allowed_origins='*'
)


def create_app(db_path: str | None = None) -> FastAPI:
    database_path = db_path or settings.DATABASE_PATH

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging()
        logger.info("Starting Recipeshare API")

        await init_db(database_path)
        logger.info("Database initialized")

        index = SqliteSearchIndex(database_path)
        app.state.search_index = index
        app.state.users = UserDirectory(db_path=database_path, index=index)
        app.state.recipe_service = RecipeService(db_path=database_path, index=index)
        app.state.relation_backend = RelationBackend(db_path=database_path)
        app.state.gateway = RealtimeGateway(
            sio,
            users=app.state.users,
            relations=app.state.relation_backend,
            user_search=SearchAdapter(index, settings.USERS_INDEX),
            recipe_search=SearchAdapter(index, settings.RECIPES_INDEX),
            db_path=database_path,
        )
        app.state.gateway.register()
        logger.info("Services initialized")

        yield

        for session in list(app.state.gateway.sessions.values()):
            session.close()
        logger.info("Shutting down application")

    app = FastAPI(
        title="Recipeshare API",
        description="Follow other cooks and browse recipes",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(users.router, prefix="/api/users", tags=["Users"])
    app.include_router(recipes.router, prefix="/api/recipes", tags=["Recipes"])
    app.include_router(following.router, prefix="/api/following", tags=["Following"])

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "service": "recipeshare",
            "realtime_sessions": len(app.state.gateway.sessions) if hasattr(app.state, 'gateway') else 0,
        }

    @app.get("/")
    async def root():
        return {
            "name": "Recipeshare API",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/health"
        }

    return app


def create_asgi_app(db_path: str | None = None) -> socketio.ASGIApp:
    """FastAPI app with Socket.IO mounted at /socket.io."""
    return socketio.ASGIApp(sio, other_asgi_app=create_app(db_path))
