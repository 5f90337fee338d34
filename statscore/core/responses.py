"""Shared API response bodies"""
from typing import Any


def success(data: Any = None, message: str = None) -> dict:
    response = {"ok": True}
    if data is not None:
        response["data"] = data
    if message:
        response["message"] = message
    return response


def error(code: str, message: str) -> dict:
    """Body for HTTPException.detail"""
    return {
        "ok": False,
        "error": {
            "code": code,
            "message": message
        }
    }


class ErrorCodes:
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"
