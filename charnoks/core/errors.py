# =========================================================
# DOMAIN ERRORS
#
# Raised by the service layer, turned into JSON by the
# handler registered in main.py:
#
#   {"error": {"kind": ..., "message": ..., **extra}}
# =========================================================

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class SaleError(Exception):
    kind = "SaleError"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, **extra):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message, **self.extra}


class InvalidRequest(SaleError):
    kind = "InvalidRequest"
    status_code = status.HTTP_400_BAD_REQUEST


class ProductNotFound(SaleError):
    kind = "ProductNotFound"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, product_id: str):
        super().__init__(f"Product {product_id} not found", product_id=product_id)
        self.product_id = product_id


class InsufficientStock(SaleError):
    kind = "InsufficientStock"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, product_id: str, product_name: str, requested: int, available: int):
        super().__init__(
            f"Insufficient stock for product {product_name}: "
            f"requested {requested}, available {available}",
            product_id=product_id,
            requested=requested,
            available=available,
            shortfall=requested - available,
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available
        self.shortfall = requested - available


class TransactionConflict(SaleError):
    kind = "TransactionConflict"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, attempts: int):
        super().__init__(
            f"Could not complete the transaction after {attempts} attempts, please try again",
            attempts=attempts,
        )
        self.attempts = attempts


class CorruptRecord(SaleError):
    kind = "CorruptRecord"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, collection: str, record_id: str, reason: str):
        super().__init__(
            f"Stored {collection} record {record_id} is malformed: {reason}",
            collection=collection,
            record_id=record_id,
        )
        self.record_id = record_id


async def sale_error_handler(request: Request, exc: SaleError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.to_dict()})


def format_validation_errors(errors) -> str:
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=InvalidRequest.status_code,
        content={
            "error": {
                "kind": InvalidRequest.kind,
                "message": format_validation_errors(exc.errors()),
            }
        },
    )
