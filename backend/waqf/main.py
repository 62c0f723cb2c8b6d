from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
import logging

from .config import settings
from .database import Base, engine
# model modules register their tables on Base
from . import models, project_models, campaign_models, product_models, content_models  # noqa: F401
from . import donation_models, order_models, user_models  # noqa: F401
from .project_routes import router as project_router
from .campaign_routes import router as campaign_router
from .product_routes import router as product_router
from .content_routes import router as content_router
from .donation_routes import router as donation_router
from .order_routes import router as order_router
from .contact_routes import router as contact_router
from .user_routes import router as user_router

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)

app = FastAPI(title="Waqf Daara API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    # unique constraints the routes did not pre-check (e.g. racing inserts)
    logger.warning("integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(status_code=409, content={"detail": "Conflict with existing data"})


@app.get('/api/v1/health')
def health():
    return {"status": "ok"}


app.include_router(project_router)
app.include_router(campaign_router)
app.include_router(product_router)
app.include_router(content_router)
app.include_router(donation_router)
app.include_router(order_router)
app.include_router(contact_router)
app.include_router(user_router)
