import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pymongo.database import Database
from pymongo.errors import PyMongoError

from auth import create_token, get_current_claims, get_settings, require_admin
from config import Settings
from database import connect, ping
from errors import ApiError, Forbidden
from logging_config import setup_logging
from payments import StripeGateway, get_gateway, to_minor_units
from repositories import (
    BookingRepository,
    PaymentRepository,
    ServiceRepository,
    UserRepository,
    get_booking_repository,
    get_db,
    get_payment_repository,
    get_service_repository,
    get_user_repository,
)
from schemas import (
    AdminStats,
    BookingConfirm,
    BookingCreate,
    PaymentCreate,
    PaymentIntentRequest,
    ServiceCreate,
    TokenRequest,
    UserCreate,
)
from services import admin_stats, record_payment

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, db: Optional[Database] = None, gateway=None) -> FastAPI:
    settings = settings or Settings()
    setup_logging(settings.log_level, settings.log_file or None)

    ping_on_startup = db is None
    if db is None:
        db = connect(settings)
    if gateway is None:
        gateway = StripeGateway(settings.stripe_secret_key, settings.payment_currency)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if ping_on_startup:
            try:
                await run_in_threadpool(ping, db)
            except PyMongoError as e:
                logger.error("MongoDB ping failed: %s", e)
        yield

    app = FastAPI(title="Style Decor API", lifespan=lifespan)
    app.state.settings = settings
    app.state.db = db
    app.state.gateway = gateway

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    register_routes(app)
    return app


# ----------------------- Errors -----------------------
def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = [{"loc": list(e["loc"]), "msg": e["msg"]} for e in exc.errors()]
        return JSONResponse(status_code=400, content={"message": "invalid request", "errors": errors})

    @app.exception_handler(PyMongoError)
    async def database_error_handler(request: Request, exc: PyMongoError):
        logger.error("Database error on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content={"message": "database error"})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"message": "internal server error"})


def register_routes(app: FastAPI) -> None:
    # ----------------------- Health -----------------------
    @app.get("/", response_class=PlainTextResponse)
    def root():
        return "Style Decor Server is Running"

    # ----------------------- Auth -----------------------
    @app.post("/jwt")
    def issue_token(body: TokenRequest, settings: Settings = Depends(get_settings)):
        return {"token": create_token(body.model_dump(), settings)}

    # ----------------------- Users -----------------------
    @app.post("/users")
    def register_user(body: UserCreate, users: UserRepository = Depends(get_user_repository)):
        return users.register(body)

    @app.get("/users", dependencies=[Depends(require_admin)])
    def list_users(users: UserRepository = Depends(get_user_repository)):
        return users.find_many()

    @app.delete("/users/{user_id}", dependencies=[Depends(require_admin)])
    def delete_user(user_id: str, users: UserRepository = Depends(get_user_repository)):
        return users.delete(user_id)

    @app.get("/users/admin/{email}")
    def is_admin(email: str, claims: dict = Depends(get_current_claims),
                 users: UserRepository = Depends(get_user_repository)):
        if claims["email"] != email:
            return {"admin": False}
        return {"admin": users.role_of(email) == "admin"}

    @app.get("/users/decorator/{email}")
    def is_decorator(email: str, claims: dict = Depends(get_current_claims),
                     users: UserRepository = Depends(get_user_repository)):
        if claims["email"] != email:
            return {"decorator": False}
        return {"decorator": users.role_of(email) == "decorator"}

    @app.patch("/users/admin/{user_id}", dependencies=[Depends(require_admin)])
    def elevate_user(user_id: str, users: UserRepository = Depends(get_user_repository)):
        return users.grant_decorator(user_id)

    # ----------------------- Services -----------------------
    @app.get("/services")
    def list_services(services: ServiceRepository = Depends(get_service_repository)):
        return services.find_many()

    @app.get("/services/{service_id}")
    def get_service(service_id: str, services: ServiceRepository = Depends(get_service_repository)):
        return services.get(service_id)

    @app.post("/services", dependencies=[Depends(require_admin)])
    def create_service(body: ServiceCreate, services: ServiceRepository = Depends(get_service_repository)):
        return services.create(body)

    @app.delete("/services/{service_id}", dependencies=[Depends(require_admin)])
    def delete_service(service_id: str, services: ServiceRepository = Depends(get_service_repository)):
        return services.delete(service_id)

    # ----------------------- Bookings -----------------------
    @app.get("/bookings", dependencies=[Depends(get_current_claims)])
    def list_bookings(email: Optional[str] = None, bookings: BookingRepository = Depends(get_booking_repository)):
        return bookings.for_user(email)

    @app.post("/bookings")
    def create_booking(body: BookingCreate, bookings: BookingRepository = Depends(get_booking_repository)):
        return bookings.create(body)

    # No ownership check: any authenticated caller can delete any booking.
    @app.delete("/bookings/{booking_id}", dependencies=[Depends(get_current_claims)])
    def delete_booking(booking_id: str, bookings: BookingRepository = Depends(get_booking_repository)):
        return bookings.delete(booking_id)

    @app.patch("/bookings/{booking_id}", dependencies=[Depends(require_admin)])
    def confirm_booking(booking_id: str, body: BookingConfirm,
                        bookings: BookingRepository = Depends(get_booking_repository)):
        return bookings.confirm(booking_id, body.decoratorName)

    # ----------------------- Payments -----------------------
    @app.post("/create-payment-intent", dependencies=[Depends(get_current_claims)])
    def create_payment_intent(body: PaymentIntentRequest, gateway=Depends(get_gateway)):
        client_secret = gateway.create_payment_intent(to_minor_units(body.price))
        return {"clientSecret": client_secret}

    @app.post("/payments", dependencies=[Depends(get_current_claims)])
    def create_payment(body: PaymentCreate, db: Database = Depends(get_db)):
        return record_payment(db, body)

    @app.get("/payments/{email}")
    def list_payments(email: str, claims: dict = Depends(get_current_claims),
                      payments: PaymentRepository = Depends(get_payment_repository)):
        if claims["email"] != email:
            raise Forbidden()
        return payments.for_email(email)

    # ----------------------- Admin -----------------------
    @app.get("/admin-stats", response_model=AdminStats, dependencies=[Depends(require_admin)])
    def get_admin_stats(db: Database = Depends(get_db)):
        return admin_stats(db)


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=app.state.settings.port)
