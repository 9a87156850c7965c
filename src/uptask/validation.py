"""
Configuration validation for UpTask application.

This module provides validation functions to ensure the application
is properly configured before startup.
"""

from __future__ import annotations

from typing import Any

from .config import DEV_JWT_SECRET, get_jwt_secret, settings
from .database.connection import test_database_connection
from .logging import get_logger

logger = get_logger(__name__)

MIN_SECRET_LENGTH = 32


class ValidationError(Exception):
    """Raised when application validation fails."""

    pass


async def validate_database_connection() -> dict[str, Any]:
    """
    Validate that the database is accessible and responsive.

    Returns a dictionary with validation results and connection details.
    """
    results: dict[str, Any] = {
        "valid": True,
        "warnings": [],
        "errors": [],
        "connection_info": None,
    }

    success, error_message = await test_database_connection()

    if success:
        results["connection_info"] = {
            "status": "connected",
            "message": "Database connection successful",
        }
        logger.info("Database connection validation successful")
    else:
        results["valid"] = False
        results["errors"].append(error_message)
        logger.error("Database connection validation failed", error=error_message)

    return results


def validate_auth_configuration() -> dict[str, Any]:
    """
    Validate the token signing configuration.

    The development secret is only a warning outside production and an
    error in production.
    """
    results: dict[str, Any] = {"valid": True, "warnings": [], "errors": []}

    secret = get_jwt_secret()

    if not secret:
        results["valid"] = False
        results["errors"].append("UPTASK_JWT_SECRET is not set")
    elif secret == DEV_JWT_SECRET:
        message = "UPTASK_JWT_SECRET is using the development default"
        if settings.is_production:
            results["valid"] = False
            results["errors"].append(message)
        else:
            results["warnings"].append(message)
    elif len(secret) < MIN_SECRET_LENGTH and settings.jwt_algorithm.startswith("HS"):
        results["warnings"].append(
            f"UPTASK_JWT_SECRET is shorter than {MIN_SECRET_LENGTH} characters"
        )

    if settings.token_expiry_hours <= 0:
        results["valid"] = False
        results["errors"].append("UPTASK_TOKEN_EXPIRY_HOURS must be positive")

    return results


async def validate_startup_configuration() -> dict[str, Any]:
    """Run every startup check and aggregate the results."""
    database = await validate_database_connection()
    auth = validate_auth_configuration()

    return {
        "database": database,
        "auth": auth,
        "overall_valid": database["valid"] and auth["valid"],
    }


def get_startup_recommendations(validation_results: dict[str, Any]) -> list[str]:
    """Turn validation warnings into actionable recommendations."""
    recommendations: list[str] = []

    for warning in validation_results.get("auth", {}).get("warnings", []):
        if "development default" in warning:
            recommendations.append("Generate a strong secret and set UPTASK_JWT_SECRET")
        elif "shorter than" in warning:
            recommendations.append("Use a longer UPTASK_JWT_SECRET for HMAC signing")

    if not validation_results.get("database", {}).get("valid", True):
        recommendations.append("Check UPTASK_DATABASE_URL and run `uptask-migrate upgrade`")

    if settings.debug and settings.is_production:
        recommendations.append("Disable UPTASK_DEBUG in production")

    return recommendations
