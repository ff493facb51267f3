"""Dependency injection for FastAPI endpoints"""

import uuid
from fastapi import Header, HTTPException, Request


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_user_id(x_user_id: str = Header(..., min_length=1, description="Owner of the invoices")) -> str:
    """User identity forwarded by the upstream auth gateway"""
    return x_user_id


def parse_uuid(value: str, label: str) -> uuid.UUID:
    """Parse a path identifier, answering 400 when malformed"""
    try:
        return uuid.UUID(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {label} ID format")
