import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .auth import get_scheme
from .broadcaster import MessageBroadcaster, MessageInbox
from .db import Stores, open_stores
from .repositories import AppointmentRepository, ClientRepository, MessageRepository, UserRepository
from .routes import appointments, clients, contact, messages, realtime, sms, users
from .scheduler import schedule_all, start_scheduler
from .settings import Settings, load_settings

logger = logging.getLogger(__name__)

def configure_logging(level: str):
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("apscheduler").setLevel(logging.WARNING)

def create_app(settings: Optional[Settings] = None, stores: Optional[Stores] = None) -> FastAPI:
    settings = settings or load_settings()
    stores = stores or open_stores(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Données dans {os.path.abspath(settings.data_dir)}")
        scheduler = None
        if settings.reminders_enabled:
            scheduler = start_scheduler()
            app.state.reschedule = lambda: schedule_all(
                app.state.appointments, scheduler,
                settings.reminder_24h, settings.reminder_1h, settings.timezone,
            )
            app.state.reschedule()
            scheduler.start()
        yield
        if scheduler:
            scheduler.shutdown(wait=False)
        logger.info("Arrêt du serveur")

    app = FastAPI(title="Riziky Agendas API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    broadcaster = MessageBroadcaster()
    app.state.settings = settings
    app.state.users = UserRepository(stores.users, get_scheme(settings.password_scheme))
    app.state.clients = ClientRepository(stores.clients)
    app.state.appointments = AppointmentRepository(stores.appointments)
    app.state.messages = MessageRepository(stores.messages)
    app.state.inbox = MessageInbox(app.state.messages, broadcaster)
    app.state.reschedule = None

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and exc.detail == "Not Found":
            return JSONResponse({"error": "Route non trouvée"}, status_code=404)
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        logger.warning(f"Données invalides pour {request.url.path}: {exc.errors()}")
        return JSONResponse({"error": "Données invalides"}, status_code=400)

    @app.exception_handler(Exception)
    async def server_error(request: Request, exc: Exception):
        logger.exception(f"Erreur non gérée sur {request.method} {request.url.path}")
        return JSONResponse({"error": "Erreur serveur"}, status_code=500)

    @app.get("/")
    def root():
        return {"message": "Bienvenue sur l'API de Riziky-Agendas"}

    for module in (users, clients, appointments, messages, contact, sms, realtime):
        app.include_router(module.router)

    os.makedirs(settings.uploads_dir, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=settings.uploads_dir), name="uploads")

    return app

settings = load_settings()
configure_logging(settings.log_level)
app = create_app(settings)

def run():
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port)

if __name__ == "__main__":
    run()
