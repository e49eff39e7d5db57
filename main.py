import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from core.config import settings
from core.database import create_db_and_tables
from core.logging_config import setup_logging
from routes.contracts import router as contracts_router
from routes.wallets import router as wallets_router

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger("financeops")


# =========================================
# 🏁 Lifespan (DB initialization)
# =========================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables()
    logger.info("✅ Database tables created on startup.")
    yield
    logger.info("✅ Application shutting down.")

# =========================================
#  ✅ FastAPI App
# =========================================
app = FastAPI(lifespan=lifespan, title="FinanceOps Contracts & Wallets API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =========================================
# 📦 Routers
# =========================================
app.include_router(contracts_router)
app.include_router(wallets_router)


# =========================================
# 🩺 Health Check
# =========================================
@app.get("/health")
def health_check():
    return {"status": "ok", "message": "Backend is running"}
