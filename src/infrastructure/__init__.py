"""
Infrastructure layer - external service integrations.

Each subdirectory wraps an external dependency:
- snowflake: Database persistence (overlay, inbox, rename intents)
- storage: Object storage (R2/S3)
- email: Transactional email (Resend)
- instagram: Instagram feed service (HTTP)

These wrappers translate between external formats and our domain models.
"""
