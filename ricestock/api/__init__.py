"""HTTP API for the rice stock ledger."""
