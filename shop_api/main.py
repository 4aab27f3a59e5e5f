from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from .core import config
from .core.database import engine, Base
from .core.cache import close_cache
from .auth.routes import router as auth_router
from .user.routes import router as user_router
from .buyer.routes import router as buyer_router
from .product.routes import router as product_router
from .order.routes import router as order_router
from .order.detail_routes import router as detail_order_router
from .rating.routes import router as rating_router
from .voucher.routes import router as voucher_router
from .book.routes import router as book_router
import logging

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create tables when starting up
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Error creating database tables: {str(e)}")
        raise

    yield

    engine.dispose()
    await close_cache()
    logger.info("Database pool and cache connection closed")


app = FastAPI(title="Shop API", lifespan=lifespan)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_envelope(message: str, error: str = None) -> dict:
    content = {"status": False, "message": message, "data": None}
    if error is not None:
        content["error"] = error
    return content


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(str(exc.detail), getattr(exc, "error", None)),
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Invalid request to {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_envelope("Data tidak valid", str(exc.errors()))
    )


# Exception handler for generic exceptions
@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_envelope("Internal server error", str(exc))
    )


# Health check endpoint
@app.get("/health")
def health_check():
    return {"status": "healthy"}


# Include routers
app.include_router(auth_router)
app.include_router(user_router)
app.include_router(buyer_router)
app.include_router(product_router)
app.include_router(order_router)
app.include_router(detail_order_router)
app.include_router(rating_router)
app.include_router(voucher_router)
app.include_router(book_router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("shop_api.main:app", host="0.0.0.0", port=config.PORT, log_level="info")
