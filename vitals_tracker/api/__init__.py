"""
HTTP layer: FastAPI routers.
"""
