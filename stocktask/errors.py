from typing import Any, Dict, Optional

# Error taxonomy shared by the mock endpoint, the HTTP server and the sdk.

_LABELS = {"tasks": "Task", "products": "Product", "categories": "Category"}


def resource_label(resource: str) -> str:
    return _LABELS.get(resource, resource.capitalize())


class StockTaskError(Exception):
    code = "error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.code, "detail": self.message}


class NotFound(StockTaskError):
    code = "not_found"
    status_code = 404

    def __init__(self, message: str, resource: Optional[str] = None, record_id: Optional[str] = None):
        super().__init__(message)
        self.resource = resource
        self.record_id = record_id

    @classmethod
    def for_record(cls, resource: str, record_id: str) -> "NotFound":
        return cls(f"{resource_label(resource)} not found: {record_id}", resource=resource, record_id=record_id)

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        payload.update({"resource": self.resource, "id": self.record_id})
        return payload


class ValidationError(StockTaskError):
    code = "validation_error"
    status_code = 422

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field

    @classmethod
    def from_pydantic(cls, exc) -> "ValidationError":
        # pydantic.ValidationError; report the first failing field
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        return cls(f"{field}: {first.get('msg')}" if field else first.get("msg"), field=field)

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        payload["field"] = self.field
        return payload


class UnknownEndpoint(StockTaskError):
    code = "unknown_endpoint"
    status_code = 404

    def __init__(self, url: str, method: Optional[str] = None):
        verb = f"{method} " if method else ""
        super().__init__(f"Unknown endpoint: {verb}{url}")
        self.url = url
        self.method = method

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        payload.update({"url": self.url, "method": self.method})
        return payload


class TransportFailure(StockTaskError):
    code = "transport_failure"
    status_code = 502

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


def error_from_response(status_code: int, payload: Any, method: str, url: str) -> StockTaskError:
    """Rebuild the error a stocktask server serialized into an HTTP error response."""
    body = payload if isinstance(payload, dict) else {}
    code = body.get("error")
    detail = body.get("detail") or f"HTTP {status_code}"

    if code == NotFound.code:
        return NotFound(detail, resource=body.get("resource"), record_id=body.get("id"))
    if code == ValidationError.code:
        return ValidationError(detail, field=body.get("field"))
    if code == UnknownEndpoint.code:
        return UnknownEndpoint(body.get("url") or url, body.get("method") or method)
    if status_code == 422:
        # FastAPI request validation: detail is a list of error dicts
        if isinstance(detail, list) and detail:
            detail = detail[0].get("msg", str(detail[0]))
        return ValidationError(str(detail))
    if status_code in (404, 405):
        return UnknownEndpoint(url, method)
    return TransportFailure(str(detail), status_code=status_code)
