# shop_checkout/main.py
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import uvicorn

from shop_checkout.api.routers import carts, health, orders
from shop_checkout.domain.errors import InvalidState, NotFound, StorageFailure, Unauthorized
from shop_checkout.utils.logging import get_logger

logger = get_logger(__name__)

# Mapowanie błędów domeny na kody HTTP
_ERROR_STATUS = {
    NotFound: 404,
    Unauthorized: 403,
    InvalidState: 400,
    StorageFailure: 503,
}


def _register_error_handlers(app: FastAPI) -> None:
    for exc_type, status_code in _ERROR_STATUS.items():

        def handler(request: Request, exc: Exception, status_code: int = status_code):
            if status_code >= 500:
                logger.error(f"{request.method} {request.url.path} failed: {exc}")
            return JSONResponse(status_code=status_code, content={"detail": str(exc)})

        app.add_exception_handler(exc_type, handler)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Checkout Service",
        version="1.0.0",
    )

    _register_error_handlers(app)

    # Include routers
    app.include_router(health.router)
    app.include_router(carts.router)
    app.include_router(orders.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
