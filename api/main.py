"""
FastAPI application for the purchase confirmation notifier.

Endpoints:
1. POST /test/order-confirmations - dispatch confirmations for an order
2. GET  /test/order-confirmations/sample - most recent paid order, as dispatch input
3. GET  /health

Run with:
    uv run uvicorn api.main:app --reload

Then visit http://localhost:8000/docs for interactive API documentation.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from api.models import ApiResponse, ErrorResponse, OrderConfirmationRequest
from confirmations.bootstrap import build_dispatcher
from confirmations.context import build_confirmation_context
from confirmations.dispatcher import NotificationDispatcher
from confirmations.errors import OrderNotFoundError
from shared.data_store import DataStore, get_data_store
from shared.settings import Settings, get_settings

# Configure logging
logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s | %(name)-24s | %(levelname)-5s | %(message)s",
    datefmt="%H:%M:%S",
)

logger = logging.getLogger("order_confirmations_api")


# Module-level instances, replaced through reset_api_state() in tests
_settings: Optional[Settings] = None
_data_store: Optional[DataStore] = None
_dispatcher: Optional[NotificationDispatcher] = None


def get_app_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = get_settings()
    return _settings


def get_store() -> DataStore:
    """Get the data store instance."""
    global _data_store
    if _data_store is None:
        _data_store = get_data_store(get_app_settings().data_dir)
    return _data_store


def get_dispatcher() -> NotificationDispatcher:
    """Get the notification dispatcher instance."""
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = build_dispatcher(get_app_settings())
    return _dispatcher


def reset_api_state(
    data_store: Optional[DataStore] = None,
    dispatcher: Optional[NotificationDispatcher] = None,
    settings: Optional[Settings] = None,
) -> None:
    """Reset API state (for testing)."""
    global _data_store, _dispatcher, _settings
    _data_store = data_store
    _dispatcher = dispatcher
    _settings = settings


# Application lifespan
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    logger.info("Starting Purchase Confirmation Notifier API")
    yield
    logger.info("Shutting down")


app = FastAPI(
    title="Purchase Confirmation Notifier",
    description="""
    Sends purchase confirmations for paid orders over email and WhatsApp.

    A failure on one channel never prevents the other from being attempted;
    the response reports each channel separately.
    """,
    version="1.0.0",
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Reject malformed input with the standard envelope."""
    logger.warning(f"Rejected request to {request.url.path}: {exc.errors()}")
    body = ErrorResponse(message="invalid request", errors=jsonable_encoder(exc.errors()))
    return JSONResponse(status_code=422, content=body.model_dump())


# =============================================================================
# Health Check
# =============================================================================

@app.get("/health", tags=["Health"])
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "purchase-confirmation-notifier"}


# =============================================================================
# Order Confirmations
# =============================================================================

@app.post("/test/order-confirmations", response_model=ApiResponse, tags=["Order Confirmations"])
def dispatch_order_confirmations(
    request: OrderConfirmationRequest,
    data_store: DataStore = Depends(get_store),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    settings: Settings = Depends(get_app_settings),
):
    """
    Send the purchase confirmation for an order on every channel.

    Returns 200 whenever dispatch was attempted, with `success` true if at
    least one channel fully succeeded. 404 if the order does not exist,
    500 if the order could not be prepared for dispatch.
    """
    try:
        context = build_confirmation_context(data_store, request.order_id, settings=settings)
    except OrderNotFoundError:
        logger.info(f"Order confirmation requested for unknown order {request.order_id}")
        return JSONResponse(
            status_code=404,
            content=ErrorResponse(message="order not found").model_dump(exclude_none=True),
        )
    except Exception:
        logger.exception(f"Failed to prepare confirmations for order {request.order_id}")
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                message="internal error while preparing order confirmations"
            ).model_dump(exclude_none=True),
        )

    outcome = dispatcher.dispatch(context)

    return ApiResponse(
        success=outcome.success,
        message=outcome.message,
        data=outcome.to_payload(),
    )


@app.get("/test/order-confirmations/sample", response_model=ApiResponse, tags=["Order Confirmations"])
def get_sample_order(data_store: DataStore = Depends(get_store)):
    """
    Get the most recently created paid order, for use as dispatch input.
    """
    order = data_store.get_latest_paid_order()
    if order is None:
        return JSONResponse(
            status_code=404,
            content=ErrorResponse(message="no paid order found").model_dump(exclude_none=True),
        )

    loaded = data_store.find_order_with_relations(order.id)
    customer = loaded.customer
    account = loaded.linked_account
    billing = loaded.billing_profile

    return ApiResponse(
        success=True,
        message="Sample order found",
        data={
            "order_id": order.id,
            "order_number": order.order_number,
            "total_amount": order.total_amount,
            "payment_status": order.payment_status,
            "customer": {
                "name": customer.name,
                "email": customer.email,
                "phone": customer.phone,
            } if customer else None,
            "linked_account": {"id": account.id, "domain": account.domain} if account else None,
            "billing_profile": {
                "tax_id": billing.tax_id,
                "organization": billing.organization,
            } if billing else None,
            "items_count": order.items_count(),
            "created_at": order.created_at.isoformat(),
        },
    )
