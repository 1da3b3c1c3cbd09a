"""HTTP surface: generation router and rate limiting."""
