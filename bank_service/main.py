import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.exceptions import HTTPException as StarletteHTTPException

# Importaciones locales
from bank_service import schemas
from bank_service.config import Settings
from bank_service.db import create_database
from bank_service.deps import (
    get_balance_reader,
    get_login_service,
    get_registration_service,
    require_user,
)
from bank_service.errors import BankServiceError, HashingError, StorageError, ValidationFailed
from bank_service.services import BalanceReader, LoginService, RegistrationService
from bank_service.store import CredentialStore
from bank_service.templates import render_transactions_page
from bank_service.utils import PasswordHasher, TokenService

# Configura logger
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

# --- Métricas Prometheus ---
REQUEST_COUNT = Counter(
    "bank_requests_total",
    "Total requests processed by Bank Service",
    ["method", "endpoint", "status_code"]
)
REQUEST_LATENCY = Histogram(
    "bank_request_latency_seconds",
    "Request latency in seconds for Bank Service",
    ["endpoint"]
)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Builds the Bank Service application.
    Every shared handle (database engine, hasher, token signer) is created here
    and injected into the services; nothing is looked up from module globals.
    """
    settings = settings or Settings.from_env()
    logging.getLogger().setLevel(settings.log_level)

    engine, session_factory = create_database(settings.database_url)
    store = CredentialStore(engine, session_factory)
    hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    token_service = TokenService(settings.access_token_secret, settings.access_token_expire_minutes)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Crea tablas si no existen al iniciar
        await store.init_schema()
        yield
        await engine.dispose()
        logger.info("Database engine disposed.")

    app = FastAPI(
        title="Bank Service",
        description="Handles user registration, authentication, and the account balance page.",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.store = store
    app.state.token_service = token_service
    app.state.registration_service = RegistrationService(
        store, hasher, allow_banker_self_registration=settings.allow_banker_self_registration
    )
    app.state.login_service = LoginService(store, hasher, token_service)
    app.state.balance_reader = BalanceReader(store)

    # --- Configuración de CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Middleware para Métricas ---
    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next):
        start_time = time.time()
        response = None
        status_code = 500 # Default a 500

        try:
            response = await call_next(request)
            status_code = response.status_code
        except Exception as exc:
            logger.error(f"Unhandled exception during request processing: {exc}", exc_info=True)
            response = JSONResponse({"message": "Internal Server Error"}, status_code=500)
        finally:
            latency = time.time() - start_time
            endpoint = request.url.path
            REQUEST_LATENCY.labels(endpoint=endpoint).observe(latency)
            REQUEST_COUNT.labels(
                method=request.method,
                endpoint=endpoint,
                status_code=status_code
            ).inc()

        return response

    # --- Manejo de errores: todas las respuestas de error son {"message": ...} ---
    @app.exception_handler(BankServiceError)
    async def bank_error_handler(request: Request, exc: BankServiceError):
        if exc.status_code >= 500:
            logger.error(f"{exc.type} error on {request.url.path}: {exc.message}")
        else:
            logger.warning(f"{exc.type} error on {request.url.path}: {exc.message}")
        return JSONResponse(exc.to_payload(), status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        detail = errors[0].get("msg", "invalid value") if errors else "invalid value"
        # loc = ("body", campo, ...); los enteros son posiciones (JSON inválido, índices de lista)
        field = ".".join(p for p in errors[0].get("loc", ())[1:] if isinstance(p, str)) if errors else ""
        error = ValidationFailed(f"Invalid request: {field} {detail}" if field else f"Invalid request: {detail}")
        logger.warning(f"Validation error on {request.url.path}: {error.message}")
        return JSONResponse(error.to_payload(), status_code=error.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse({"message": str(exc.detail)}, status_code=exc.status_code, headers=exc.headers)

    # --- Endpoints de Salud y Métricas ---
    @app.get("/metrics", tags=["Monitoring"])
    def metrics():
        """Exposes application metrics for Prometheus."""
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.get("/health", tags=["Monitoring"])
    def health_check():
        """Performs a basic health check of the service."""
        return {"status": "ok", "service": "bank_service"}

    # --- Endpoints de API ---

    @app.post("/register", response_model=schemas.MessageResponse, tags=["Authentication"])
    async def register(
        user: schemas.UserCreate,
        service: RegistrationService = Depends(get_registration_service),
    ):
        """
        Registers a new user with email and password.
        Duplicate emails answer 409; storage or hashing failures answer 500.
        """
        try:
            await service.register(user)
        except (StorageError, HashingError):
            raise BankServiceError("Error registering user")
        return {"message": "User registered successfully"}

    @app.post("/login", response_model=schemas.Token, tags=["Authentication"])
    async def login(
        credentials: schemas.LoginRequest,
        service: LoginService = Depends(get_login_service),
    ):
        """
        Authenticates a user by email and password.
        Returns a JWT access token upon successful authentication.
        """
        try:
            access_token = await service.login(credentials)
        except StorageError:
            raise BankServiceError("Error logging in")
        return schemas.Token(access_token=access_token)

    @app.get("/transactions", response_class=HTMLResponse, tags=["Transactions"])
    async def transactions(
        request: Request,
        claims: schemas.TokenClaims = Depends(require_user),
        reader: BalanceReader = Depends(get_balance_reader),
    ):
        """Renders the balance page for the authenticated user's account."""
        account = await reader.get_account(claims)
        return HTMLResponse(render_transactions_page(account.amount, request.headers["Authorization"]))

    return app


def run() -> None:
    """Entry point: `bank-service` (lee la configuración del entorno)."""
    settings = Settings.from_env()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
