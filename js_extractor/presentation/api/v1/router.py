"""V1 API router — aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from js_extractor.presentation.api.v1.endpoints.health import router as health_router
from js_extractor.presentation.api.v1.extraction_jobs_controller import router as extraction_jobs_router
from js_extractor.presentation.api.v1.downloads_controller import router as downloads_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(extraction_jobs_router)
router.include_router(downloads_router)
