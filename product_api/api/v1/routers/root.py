# product_api/api/v1/routers/root.py
from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["root"])

WELCOME_TEXT = "Welcome to the Product API! Go to /api/products to see all products."


@router.get("/", response_class=PlainTextResponse)
async def welcome():
    return WELCOME_TEXT
