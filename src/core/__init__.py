"""
Core business logic for the studio site.

This module is framework-agnostic - it doesn't import FastAPI, Snowflake,
R2 or Resend. Workflows depend on small Protocols, so they can be tested
against in-memory fakes and the infrastructure can change underneath.
"""
