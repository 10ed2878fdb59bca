"""Core domain layer: entities, exceptions, store interfaces and metrics."""
