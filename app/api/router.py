# app/api/router.py
from fastapi import APIRouter
from app.api import routes_admissions

api_router = APIRouter()

# ---- Admissions
api_router.include_router(routes_admissions.router,
                          prefix="/admissions",
                          tags=["admissions"])
