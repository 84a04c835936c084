# app/core/config.py
import os
from typing import List
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()


def _split_csv(value: str) -> List[str]:
    return [v.strip() for v in (value or "").split(",") if v.strip()]


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


class Settings(BaseModel):
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "Admission Reports")
    API_V1_STR: str = os.getenv("API_V1_STR", "/api")

    # CORS (env takes priority)
    BACKEND_CORS_ORIGINS: List[str] = _split_csv(
        os.getenv(
            "CORS_ORIGINS",
            "http://localhost:3000,http://127.0.0.1:3000",
        ))

    # ---------- Remote admissions backend ----------
    ADMISSIONS_API_URL: str = os.getenv("ADMISSIONS_API_URL",
                                        "http://127.0.0.1:5000/api")
    ADMISSIONS_API_TIMEOUT: float = float(
        os.getenv("ADMISSIONS_API_TIMEOUT", "15") or 15)

    # ---------- Report rendering ----------
    IMAGE_FETCH_TIMEOUT: float = float(
        os.getenv("IMAGE_FETCH_TIMEOUT", "15") or 15)
    REPORT_TIMEZONE: str = os.getenv("REPORT_TIMEZONE", "Asia/Kolkata")
    PDF_SHOW_PAGE_NUMBERS: bool = _flag("PDF_SHOW_PAGE_NUMBERS", "true")

    # ---------- Logging ----------
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE: str = os.getenv("LOG_FILE", "")


settings = Settings()
