"""Core application components.

This module provides the foundational components for the bridge API:
- Application settings and configuration
- The clock seam used for invoice dates and generated identifiers
- FastAPI dependency providers for app-owned state
"""
