from fastapi import APIRouter

from .credits import credit_router
from .payments import payment_router
from .overdue import overdue_router

router = APIRouter()

router.include_router(credit_router, tags=["Credits"])
router.include_router(payment_router, tags=["Payments"])
router.include_router(overdue_router, tags=["Collections"])
