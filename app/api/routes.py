from fastapi import APIRouter
from app.controllers import auth_controller
from app.controllers import bulk_upload_controller
from app.controllers import profile_controller
from app.controllers import user_controller


router = APIRouter()


router.include_router(auth_controller.router, prefix="/auth", tags=["Auth"])
router.include_router(profile_controller.router, prefix="/profile", tags=["Profile"])
router.include_router(user_controller.router, prefix="/users", tags=["Users"])
router.include_router(bulk_upload_controller.router, prefix="/admin", tags=["Bulk Upload"])
