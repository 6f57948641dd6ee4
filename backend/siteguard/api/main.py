from fastapi import APIRouter

from siteguard.api.routes import ai, architecture, auth, resources, safety_reports, utils, workspaces

api_router = APIRouter()
api_router.include_router(utils.router)
api_router.include_router(auth.router)
api_router.include_router(workspaces.router)
# Before resources, so /resources/insights is matched ahead of /{resource_id}.
api_router.include_router(ai.router)
api_router.include_router(resources.router)
api_router.include_router(architecture.router)
api_router.include_router(safety_reports.router)
