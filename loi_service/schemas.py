"""
Request schemas for the document endpoints.

`LetterRequest` is deliberately lenient: every field is optional and values
that cannot be used are coerced to None so the letter falls back to its
default text instead of failing validation.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Address(BaseModel):
    model_config = ConfigDict(extra="ignore")

    full: Optional[str] = None


def _clean_str(v: Any) -> Optional[str]:
    if isinstance(v, str):
        v = v.strip()
        return v or None
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return None


def _clean_number(v: Any) -> Optional[float]:
    if isinstance(v, bool) or v is None:
        return None
    if isinstance(v, (int, float)):
        try:
            n = float(v)
        except OverflowError:
            return None
        return n if math.isfinite(n) else None
    if isinstance(v, str):
        s = v.strip().lstrip("$").replace(",", "")
        if not s:
            return None
        try:
            n = float(s)
        except (ValueError, OverflowError):
            return None
        return n if math.isfinite(n) else None
    return None


class LetterRequest(BaseModel):
    """Form data for a Letter of Intent. Field names follow the client's camelCase JSON."""

    model_config = ConfigDict(extra="ignore")

    address: Optional[Address] = Field(None, description="Property address, as a string or {full: string}")
    buyerEntity: Optional[str] = Field(None, description="Purchasing entity name")
    owner: Optional[str] = Field(None, description="Current property owner / seller")
    acceptBy: Optional[str] = Field(None, description="Date through which the letter is open for acceptance")
    today: Optional[str] = Field(None, description="Letter date; defaults to the current date")

    price: Optional[float] = None
    financing: Optional[float] = None
    earnest1: Optional[float] = None
    earnest2: Optional[float] = None
    totalEarnest: Optional[float] = None

    @field_validator("address", mode="before")
    @classmethod
    def _coerce_address(cls, v):
        if isinstance(v, str):
            return {"full": v.strip() or None}
        if isinstance(v, dict):
            return {"full": _clean_str(v.get("full"))}
        return None

    @field_validator("buyerEntity", "owner", "acceptBy", "today", mode="before")
    @classmethod
    def _coerce_text(cls, v):
        return _clean_str(v)

    @field_validator("price", "financing", "earnest1", "earnest2", "totalEarnest", mode="before")
    @classmethod
    def _coerce_number(cls, v):
        return _clean_number(v)

    @property
    def address_text(self) -> Optional[str]:
        return self.address.full if self.address else None

    @classmethod
    def from_payload(cls, payload: Any) -> "LetterRequest":
        """Build a request from any decoded JSON body; non-objects become the empty record."""
        if not isinstance(payload, dict):
            return cls()
        return cls.model_validate(payload)


class PdfRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    html: Optional[str] = None


class ZipEntry(BaseModel):
    data: str
    filename: Optional[str] = None

    @field_validator("filename", mode="before")
    @classmethod
    def _coerce_filename(cls, v):
        return v if isinstance(v, str) else None


class ZipRequest(BaseModel):
    """`pdfs` is checked by the handler so a non-list gets the service's own 400 body."""

    model_config = ConfigDict(extra="ignore")

    pdfs: Optional[Any] = None

    def entries(self) -> Optional[List[Dict[str, Any]]]:
        return self.pdfs if isinstance(self.pdfs, list) else None
