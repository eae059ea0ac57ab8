import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from app.core.config import settings
from app.core.database import SessionLocal
from app.core.logging import configure_logging
from app.api.routes.houses import router as houses_router
from app.api.routes.service_codes import router as service_codes_router
from app.api.routes.staff import router as staff_router
from app.api.routes.patients import router as patients_router
from app.api.routes.payout_rates import router as payout_rates_router
from app.api.routes.revenue_entries import router as revenue_entries_router
from app.api.routes.payouts import router as payouts_router
from app.api.routes.check_tracking import router as check_tracking_router
from app.api.routes.expenses import router as expenses_router
from app.api.routes.reports import router as reports_router
from app.api.routes.audit_logs import router as audit_logs_router

configure_logging()
logger = logging.getLogger(__name__)

# 1) Create the app FIRST
app = FastAPI(title="Revenue & Payout Backend")

# 2) Add CORS Middleware BEFORE routes
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 3) Include routers AFTER app is created
app.include_router(houses_router)
app.include_router(service_codes_router)
app.include_router(staff_router)
app.include_router(patients_router)
app.include_router(payout_rates_router)
app.include_router(revenue_entries_router)
app.include_router(payouts_router)
app.include_router(check_tracking_router)
app.include_router(expenses_router)
app.include_router(reports_router)
app.include_router(audit_logs_router)

logger.info("Revenue & payout backend started (env=%s)", settings.ENV)


# 4) Health check endpoints
@app.get("/health")
def health():
    return {"ok": True, "service": "backend"}

@app.get("/db-health")
def db_health():
    db = SessionLocal()
    try:
        db.execute(text("select 1"))
        return {"ok": True, "db": "connected"}
    finally:
        db.close()
