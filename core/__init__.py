"""
Core module for shared domain infrastructure.

This module contains:
- Domain exceptions and value objects
- Prometheus metrics
- Middleware components
- Shared utilities
"""
