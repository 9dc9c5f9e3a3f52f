"""Typed async client for the CauseConnect API."""

from causeconnect.client.api_client import ApiError, CauseConnectClient

__all__ = ["ApiError", "CauseConnectClient"]
