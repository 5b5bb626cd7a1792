"""
Studio Site API - backend for a photographer/videographer portfolio.

This package contains the complete application:
- core: Framework-agnostic business logic (media, inbox, booking, auth)
- infrastructure: External service integrations (R2, Snowflake, Resend, feeds)
- api: FastAPI routes and dependencies
- config: Application configuration
"""

__version__ = "0.1.0"
