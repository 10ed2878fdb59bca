"""
Application layer - Use cases and DTOs.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing one use case per ledger mutation or report

Use cases are the only entry point for API handlers.
"""
