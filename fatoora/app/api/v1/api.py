from fastapi import APIRouter

from fatoora.app.api.v1.endpoints import invoices, qr

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(qr.router, prefix="/qr", tags=["qr"])
api_router.include_router(invoices.router, prefix="/invoices", tags=["invoices"])
