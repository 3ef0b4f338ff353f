"""HTTP layer: application factory, routers, middleware and response schemas."""
