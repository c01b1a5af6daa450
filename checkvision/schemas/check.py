"""
check.py (Schemas)

Pydantic models for check analysis.

These schemas define:
- CheckRecord: the fixed 13-field extraction result
- AnalysisResult: CheckRecord plus confidence and processing time
- Request and response envelopes used by the API

Field names go over the wire in camelCase (accountHolder, bankName, ...).
Python code uses the snake_case attribute names.

This file does NOT:
- Call Gemini
- Parse AI text (see services/normalizer.py)
"""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


NOT_FOUND = "Not found"
NOT_DETECTED = "Not detected"

# Wire name -> sentinel used when the AI gave nothing for that field.
# Order matches the prompt and the CLI table.
FIELD_DEFAULTS: Dict[str, str] = {
    "accountHolder": NOT_FOUND,
    "accountNumber": NOT_FOUND,
    "routingNumber": NOT_FOUND,
    "bankName": NOT_FOUND,
    "ifscCode": NOT_FOUND,
    "micrCode": NOT_FOUND,
    "checkNumber": NOT_FOUND,
    "date": NOT_FOUND,
    "amountNumbers": NOT_FOUND,
    "amountWords": NOT_FOUND,
    "signatureStatus": NOT_DETECTED,
    "memo": NOT_FOUND,
    "address": NOT_FOUND,
}

CHECK_FIELDS = tuple(FIELD_DEFAULTS)

# Human-readable labels shown by the CLI client
FIELD_LABELS: Dict[str, str] = {
    "accountHolder": "Account Holder",
    "accountNumber": "Account Number",
    "routingNumber": "Routing Number",
    "bankName": "Bank Name",
    "ifscCode": "IFSC Code",
    "micrCode": "MICR Code",
    "checkNumber": "Check Number",
    "date": "Date",
    "amountNumbers": "Amount (Numbers)",
    "amountWords": "Amount (Words)",
    "signatureStatus": "Signature Status",
    "memo": "Memo",
    "address": "Address",
}


class CheckRecord(BaseModel):
    """
    CheckRecord

    Every field is always present and always a string.
    A field the AI could not read holds "Not found"
    ("Not detected" for signature_status).
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    account_holder: str = Field(default=NOT_FOUND, alias="accountHolder", examples=["John Doe"])
    account_number: str = Field(default=NOT_FOUND, alias="accountNumber", examples=["000123456789"])
    routing_number: str = Field(default=NOT_FOUND, alias="routingNumber", examples=["021000021"])
    bank_name: str = Field(default=NOT_FOUND, alias="bankName", examples=["State Bank of India"])
    ifsc_code: str = Field(default=NOT_FOUND, alias="ifscCode", examples=["SBIN0001234"])
    micr_code: str = Field(default=NOT_FOUND, alias="micrCode", examples=["400002005"])
    check_number: str = Field(default=NOT_FOUND, alias="checkNumber", examples=["100245"])
    date: str = Field(default=NOT_FOUND, alias="date", examples=["12/05/2025"])
    amount_numbers: str = Field(default=NOT_FOUND, alias="amountNumbers", examples=["1,500.00"])
    amount_words: str = Field(
        default=NOT_FOUND,
        alias="amountWords",
        examples=["One thousand five hundred only"]
    )
    signature_status: str = Field(default=NOT_DETECTED, alias="signatureStatus", examples=["Present"])
    memo: str = Field(default=NOT_FOUND, alias="memo", examples=["Rent"])
    address: str = Field(default=NOT_FOUND, alias="address", examples=["12 MG Road, Pune"])

    def to_fields(self) -> Dict[str, str]:
        """Return the thirteen fields keyed by their wire names."""
        return {name: getattr(self, _ATTRIBUTES[name]) for name in CHECK_FIELDS}


_ATTRIBUTES: Dict[str, str] = {
    field.alias: attribute for attribute, field in CheckRecord.model_fields.items()
}


class AnalysisResult(CheckRecord):
    """
    AnalysisResult

    The normalized CheckRecord plus two derived values.
    Created once per successful analysis and never stored.
    """

    extraction_confidence: int = Field(
        ...,
        alias="extractionConfidence",
        description="Fixed confidence value reported with every result",
        examples=[95]
    )
    processing_time: int = Field(
        ...,
        alias="processingTime",
        description="Completion time in milliseconds since the Unix epoch",
        examples=[1760000000000]
    )


class AnalyzeRequest(BaseModel):
    """
    Request body for POST /analyze.

    Both fields are optional here so the route can answer a
    missing field with a plain 400 instead of a schema error.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    image_data: Optional[str] = Field(
        default=None,
        alias="imageData",
        description="Base64-encoded check image (no data: prefix)"
    )
    mime_type: Optional[str] = Field(
        default=None,
        alias="mimeType",
        description="Declared media type of the image",
        examples=["image/jpeg"]
    )


class AnalyzeResponse(BaseModel):
    """Success envelope returned by the analyze endpoints."""

    success: bool = Field(default=True)
    data: AnalysisResult


class ErrorResponse(BaseModel):
    """Failure envelope returned for every error."""

    success: bool = Field(default=False)
    error: str = Field(..., examples=["Failed to parse Gemini AI response"])


class HealthResponse(BaseModel):
    """Response of GET|POST /health. Never contains the key itself."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = Field(default=True)
    message: str
    timestamp: str = Field(..., description="ISO-8601 UTC time of the check")
    environment: str
    api_key_configured: bool = Field(..., alias="apiKeyConfigured")
    version: str
