"""Infrastructure layer: concrete storage implementations."""
