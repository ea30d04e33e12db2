"""
Typed failures raised by the query engine.

``ParseError`` covers an unusable SELECT / FROM clause; ``ValidationError``
covers everything that parses but cannot be served (bad page token, page size
out of range, unsupported resource, non-ISO BETWEEN literal).  Both render to
the Google Ads error envelope via ``to_response``.
"""
from __future__ import annotations

from typing import Any

_FAILURE_TYPE = "type.googleapis.com/google.ads.googleads.v21.errors.GoogleAdsFailure"


class QueryEngineError(Exception):
    """Base class for every error the engine surfaces to a caller."""

    code: int = 400
    status: str = "INVALID_ARGUMENT"
    error_kind: str = "queryError"

    def __init__(self, message: str, reason: str = "INVALID_ARGUMENT"):
        super().__init__(message)
        self.message = message
        self.reason = reason

    def to_response(self) -> dict[str, Any]:
        return {
            "error": {
                "code": self.code,
                "message": "Request contains an invalid argument.",
                "status": self.status,
                "details": [
                    {
                        "@type": _FAILURE_TYPE,
                        "errors": [
                            {
                                "errorCode": {self.error_kind: self.reason},
                                "message": self.message,
                            }
                        ],
                    }
                ],
            }
        }


class ParseError(QueryEngineError):
    """The query text has no usable SELECT or FROM clause."""


class ValidationError(QueryEngineError):
    """The query parsed but one of its inputs cannot be honoured."""

    error_kind = "requestError"
