"""HTTP client helpers shared by the external services."""
