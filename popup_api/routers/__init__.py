"""
FastAPI routers.

Each module exposes an APIRouter included by ``popup_api.app``.
"""
