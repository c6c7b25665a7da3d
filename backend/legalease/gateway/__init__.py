"""
API Gateway Module

This module provides a centralized gateway layer for the API that handles:
- Middleware management
- Error handling
- Rate limiting
- API documentation

The gateway acts as the single entry point for all API requests.
"""
from .gateway import APIGateway

__all__ = ["APIGateway"]
