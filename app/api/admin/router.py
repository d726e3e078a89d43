from fastapi import APIRouter
from app.api.admin.grid_modules import router as grid

router = APIRouter()
router.include_router(grid.router, tags=["AdminGrid"])
