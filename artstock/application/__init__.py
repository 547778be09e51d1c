"""
Application layer - DTOs and service factories.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Providing factory functions that wire stores to core services
"""

from artstock.application.services import (
    ServiceContainer,
    build_services,
    get_services,
    reset_services,
)

__all__ = [
    "ServiceContainer",
    "build_services",
    "get_services",
    "reset_services",
]
