"""
Runtime configuration for the LOI document service.

All settings come from environment variables so the service can run unchanged
in a container or locally.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List


PDF_ENGINES = ("chromium", "weasyprint")


@dataclass(frozen=True)
class ServiceConfig:
    host: str = "0.0.0.0"
    port: int = 3000
    pdf_engine: str = "chromium"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"


def _cors_origins_from_env() -> List[str]:
    raw = os.getenv("CORS_ALLOW_ORIGINS", "*")
    if raw.strip() == "*":
        return ["*"]
    return [o.strip() for o in raw.split(",") if o.strip()]


def load_config() -> ServiceConfig:
    port = int(os.getenv("PORT", "3000") or "3000")
    host = os.getenv("HOST", "0.0.0.0") or "0.0.0.0"
    pdf_engine = (os.getenv("PDF_ENGINE", "chromium") or "chromium").strip().lower()
    if pdf_engine not in PDF_ENGINES:
        raise ValueError(f"Unsupported PDF_ENGINE {pdf_engine!r} (expected one of {', '.join(PDF_ENGINES)})")
    log_level = (os.getenv("LOG_LEVEL", "INFO") or "INFO").strip().upper()
    return ServiceConfig(
        host=host,
        port=port,
        pdf_engine=pdf_engine,
        cors_origins=_cors_origins_from_env(),
        log_level=log_level,
    )
