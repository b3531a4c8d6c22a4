from __future__ import annotations

import logging
import random
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from .auth.dependencies import optional_user, require_user
from .auth.models import (
    LoginRequest,
    ProfileUpdateRequest,
    SignupRequest,
    UserOut,
    UserResponse,
)
from .auth.users import authenticate, register_user, update_profile
from .config import DEFAULT_SERVER_CONFIG, ServerConfig
from .delivery.models import (
    DeliveryAvailabilityResponse,
    DeliveryFeeResponse,
    OutletListResponse,
    OutletResponse,
)
from .delivery.service import (
    check_delivery_availability,
    get_delivery_fee,
    get_outlet,
    list_outlets,
)
from .errors import ErrorResponse, FruityGulpError
from .orders.models import (
    CreateOrderRequest,
    MessageResponse,
    OrderListResponse,
    OrderResponse,
    OrderStatus,
    OrderTrackingResponse,
    ReorderRequest,
)
from .orders.pipeline import create_order, reorder
from .orders.queries import get_order, list_orders
from .orders.status import cancel_order, get_order_status
from .products.catalog import (
    get_product,
    list_categories,
    list_featured,
    list_products,
    search_products,
)
from .products.models import CategoryListResponse, ProductListResponse, ProductResponse
from .recommendations.models import (
    HealthBenefitListResponse,
    RecommendationRequest,
    RecommendationResponse,
    SymptomListResponse,
)
from .recommendations.retrieval import (
    get_recommendations,
    list_available_symptoms,
    list_health_benefits,
)
from .store.base import Store
from .store.data_store import get_store

logging.basicConfig(
    level=DEFAULT_SERVER_CONFIG.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

RATE_LIMITED_MESSAGE = "Too many requests from this IP, please try again later."


def build_limiter(config: ServerConfig = DEFAULT_SERVER_CONFIG) -> Limiter:
    return Limiter(
        key_func=get_remote_address,
        default_limits=[config.rate_limit],
        enabled=config.rate_limit_enabled,
    )


app = FastAPI(title="Fruity Gulp API", version="1.0.0")
app.state.limiter = build_limiter()
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(SessionMiddleware, secret_key=DEFAULT_SERVER_CONFIG.session_secret)
# Outermost, so preflight requests are answered before rate limiting
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(DEFAULT_SERVER_CONFIG.allowed_origins),
    allow_credentials=True,
    allow_methods=list(DEFAULT_SERVER_CONFIG.allowed_methods),
    allow_headers=list(DEFAULT_SERVER_CONFIG.allowed_headers),
)


def get_rng() -> random.Random:
    return random.Random()


def get_now() -> datetime:
    return datetime.now(timezone.utc)


# ── Error envelopes ──────────────────────────────────────────────────────


@app.exception_handler(FruityGulpError)
async def handle_domain_error(request: Request, exc: FruityGulpError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    body = ErrorResponse(
        message=exc.message,
        error=exc.kind,
        product_id=exc.details.get("product_id"),
    )
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(exclude_none=True))


@app.exception_handler(StarletteHTTPException)
async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    kind = {401: "unauthorized", 403: "forbidden", 404: "not_found"}.get(exc.status_code, "http_error")
    body = ErrorResponse(message=str(exc.detail), error=kind)
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(exclude_none=True),
        headers=exc.headers,
    )


# SlowAPIMiddleware calls this directly, so it stays synchronous
@app.exception_handler(RateLimitExceeded)
def handle_rate_limited(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning("Rate limit hit by %s on %s", get_remote_address(request), request.url.path)
    body = ErrorResponse(message=RATE_LIMITED_MESSAGE, error="rate_limited")
    return JSONResponse(status_code=429, content=body.model_dump(exclude_none=True))


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in err["loc"][1:]) or str(err["loc"][0]),
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    body = ErrorResponse(message="Validation error", error="invalid_input", errors=errors)
    return JSONResponse(status_code=400, content=body.model_dump(exclude_none=True))


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/auth/signup", response_model=UserResponse, status_code=201)
def signup(body: SignupRequest, request: Request) -> UserResponse:
    user = register_user(body.name, body.email, body.password, body.phone)
    request.session["user"] = user
    return UserResponse(message="Account created successfully", data=UserOut(**user))


@app.post("/auth/login", response_model=UserResponse)
def login(body: LoginRequest, request: Request) -> UserResponse:
    user = authenticate(body.email, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["user"] = user
    return UserResponse(message="Login successful", data=UserOut(**user))


@app.post("/auth/logout", response_model=MessageResponse)
def logout(request: Request, user: dict = Depends(require_user)) -> MessageResponse:
    request.session.clear()
    return MessageResponse(message="Logged out successfully")


@app.get("/auth/profile", response_model=UserResponse)
def profile(user: dict = Depends(require_user)) -> UserResponse:
    return UserResponse(data=UserOut(**user))


@app.put("/auth/profile", response_model=UserResponse)
def edit_profile(
    body: ProfileUpdateRequest,
    request: Request,
    user: dict = Depends(require_user),
) -> UserResponse:
    updated = update_profile(user["id"], name=body.name, phone=body.phone)
    request.session["user"] = updated
    return UserResponse(message="Profile updated successfully", data=UserOut(**updated))


# ── Product endpoints ────────────────────────────────────────────────────


@app.get("/products", response_model=ProductListResponse)
def products(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    category: str | None = None,
    search: str | None = None,
    sort: str = Query(default="created_at", pattern="^(name|price|created_at)$"),
    order: str = Query(default="desc", pattern="^(asc|desc)$"),
    store: Store = Depends(get_store),
) -> ProductListResponse:
    items, pagination = list_products(store, page, limit, category, search, sort, order)
    return ProductListResponse(data=items, pagination=pagination)


@app.get("/products/featured", response_model=ProductListResponse)
def featured_products(
    limit: int = Query(default=6, ge=1, le=100),
    store: Store = Depends(get_store),
) -> ProductListResponse:
    return ProductListResponse(data=list_featured(store, limit))


@app.get("/products/categories", response_model=CategoryListResponse)
def product_categories(store: Store = Depends(get_store)) -> CategoryListResponse:
    return CategoryListResponse(data=list_categories(store))


@app.get("/products/search", response_model=ProductListResponse)
def product_search(
    q: str = "",
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    store: Store = Depends(get_store),
) -> ProductListResponse:
    items, pagination = search_products(store, q, page, limit)
    return ProductListResponse(data=items, pagination=pagination, search_query=q)


@app.get("/products/category/{category}", response_model=ProductListResponse)
def products_by_category(
    category: str,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    store: Store = Depends(get_store),
) -> ProductListResponse:
    items, pagination = list_products(store, page, limit, category=category)
    return ProductListResponse(data=items, pagination=pagination)


@app.get("/products/{product_id}", response_model=ProductResponse)
def product_detail(product_id: str, store: Store = Depends(get_store)) -> ProductResponse:
    return ProductResponse(data=get_product(store, product_id))


# ── Recommendation endpoints ─────────────────────────────────────────────


@app.post("/recommendations", response_model=RecommendationResponse)
def recommendations(
    body: RecommendationRequest,
    store: Store = Depends(get_store),
    rng: random.Random = Depends(get_rng),
    user: dict | None = Depends(optional_user),
) -> RecommendationResponse:
    return get_recommendations(body, store, rng=rng, user_id=user["id"] if user else None)


@app.get("/recommendations/symptoms", response_model=SymptomListResponse)
def available_symptoms(store: Store = Depends(get_store)) -> SymptomListResponse:
    return SymptomListResponse(data=list_available_symptoms(store))


@app.get("/recommendations/health-benefits", response_model=HealthBenefitListResponse)
def health_benefits(store: Store = Depends(get_store)) -> HealthBenefitListResponse:
    return HealthBenefitListResponse(data=list_health_benefits(store))


# ── Delivery endpoints ───────────────────────────────────────────────────


@app.get("/delivery/fee", response_model=DeliveryFeeResponse)
def delivery_fee(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    store: Store = Depends(get_store),
) -> DeliveryFeeResponse:
    return DeliveryFeeResponse(data=get_delivery_fee(store, lat, lng))


@app.get("/delivery/availability", response_model=DeliveryAvailabilityResponse)
def delivery_availability(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    store: Store = Depends(get_store),
) -> DeliveryAvailabilityResponse:
    return DeliveryAvailabilityResponse(data=check_delivery_availability(store, lat, lng))


@app.get("/delivery/outlets", response_model=OutletListResponse)
def outlets(store: Store = Depends(get_store)) -> OutletListResponse:
    return OutletListResponse(data=list_outlets(store))


@app.get("/delivery/outlets/{outlet_id}", response_model=OutletResponse)
def outlet_detail(outlet_id: str, store: Store = Depends(get_store)) -> OutletResponse:
    return OutletResponse(data=get_outlet(store, outlet_id))


# ── Order endpoints ──────────────────────────────────────────────────────


@app.post("/orders", response_model=OrderResponse, status_code=201)
def place_order(
    body: CreateOrderRequest,
    user: dict = Depends(require_user),
    store: Store = Depends(get_store),
    rng: random.Random = Depends(get_rng),
    now: datetime = Depends(get_now),
) -> OrderResponse:
    order = create_order(store, user["id"], body, rng=rng, now=now)
    return OrderResponse(message="Order created successfully", data=order)


@app.get("/orders", response_model=OrderListResponse)
def user_orders(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    status: OrderStatus | None = None,
    user: dict = Depends(require_user),
    store: Store = Depends(get_store),
) -> OrderListResponse:
    orders, pagination = list_orders(store, user["id"], page, limit, status)
    return OrderListResponse(data=orders, pagination=pagination)


@app.get("/orders/{order_id}", response_model=OrderResponse)
def order_detail(
    order_id: str,
    user: dict = Depends(require_user),
    store: Store = Depends(get_store),
) -> OrderResponse:
    return OrderResponse(data=get_order(store, user["id"], order_id))


@app.get("/orders/{order_id}/status", response_model=OrderTrackingResponse)
def order_status(
    order_id: str,
    user: dict = Depends(require_user),
    store: Store = Depends(get_store),
    now: datetime = Depends(get_now),
) -> OrderTrackingResponse:
    return OrderTrackingResponse(data=get_order_status(store, user["id"], order_id, now=now))


@app.put("/orders/{order_id}/cancel", response_model=MessageResponse)
def order_cancel(
    order_id: str,
    user: dict = Depends(require_user),
    store: Store = Depends(get_store),
    now: datetime = Depends(get_now),
) -> MessageResponse:
    cancel_order(store, user["id"], order_id, now=now)
    return MessageResponse(message="Order cancelled successfully")


@app.post("/orders/{order_id}/reorder", response_model=OrderResponse, status_code=201)
def order_again(
    order_id: str,
    body: ReorderRequest | None = None,
    user: dict = Depends(require_user),
    store: Store = Depends(get_store),
    rng: random.Random = Depends(get_rng),
    now: datetime = Depends(get_now),
) -> OrderResponse:
    order = reorder(store, user["id"], order_id, body, rng=rng, now=now)
    return OrderResponse(message="Order created successfully", data=order)
