"""HTTP API: application factory, routers and the RPC layer."""
