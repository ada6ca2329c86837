import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from invoicedesk import database
from invoicedesk.config import settings
from invoicedesk.middleware.exceptions import register_exception_handlers
from invoicedesk.routers import company, health, invoices, quotations

logger = logging.getLogger("invoicedesk")


def configure_logging() -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info("InvoiceDesk starting (%s)", settings.environment)
    yield
    await database.engine.dispose()
    logger.info("InvoiceDesk stopped")


app = FastAPI(
    title="InvoiceDesk",
    description="Invoices, quotations and quotation-to-invoice conversion",
    version="0.1.0",
    lifespan=lifespan,
)

# ── Exception Handlers ───────────────────────────────────────
register_exception_handlers(app)

# ── Middleware ───────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ──────────────────────────────────────────────────
app.include_router(health.router)
app.include_router(invoices.router, prefix="/api/invoices", tags=["invoices"])
app.include_router(quotations.router, prefix="/api/quotations", tags=["quotations"])
app.include_router(company.router, prefix="/api/company", tags=["company"])
