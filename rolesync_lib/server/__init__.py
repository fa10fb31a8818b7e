"""Server module: health and operator endpoints."""
