"""API v1 router aggregator.

All v1 endpoint routers are included here.
"""

from fastapi import APIRouter

from jobsearch_bot.api.v1 import telegram

router = APIRouter()

router.include_router(telegram.router, prefix="/telegram", tags=["telegram"])
