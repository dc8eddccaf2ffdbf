from fastapi import APIRouter
from markov_chain.api.api_v1 import chain
from markov_chain.api.api_v1 import generate


api_router = APIRouter()

api_router.include_router(chain.router, prefix="", tags=["chain"])
api_router.include_router(generate.router, prefix="", tags=["generate"])
