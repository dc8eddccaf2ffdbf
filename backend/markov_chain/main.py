import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from markov_chain.core.config import settings
from markov_chain.core.database import engine
from markov_chain.api.api_v1.api import api_router
from markov_chain.initialization import ApplicationInitializer
from markov_chain.store import SqlTransitionStore

# Initialize logger for uvicorn
uvicorn_logger = logging.getLogger("uvicorn")

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""

    store = SqlTransitionStore(engine)
    initializer = ApplicationInitializer(store)

    try:
        uvicorn_logger.info("🚀 Starting Markov Chain API initialization...")

        db_status = initializer.initialize_database()
        if "error" in db_status:
            uvicorn_logger.warning("⚠️ Database initialization incomplete")
            uvicorn_logger.error(f"❌ Error: {db_status['error']}")
        elif db_status["snapshot_loaded"]:
            uvicorn_logger.info(f"⚡ Snapshot loaded in {db_status['load_time']:.2f}s")

        if db_status.get("pruned"):
            uvicorn_logger.info(f"✂️ Pruned {db_status['pruned']:,} sparse entries")

        app.state.store = store
        app.state.initializer = initializer
        app.state.initialization_summary = initializer.get_initialization_summary()

        uvicorn_logger.info(f"🎉 Markov Chain API ready with {db_status['chain_entries']:,} entries! 🚀")

        yield

    except Exception as e:
        uvicorn_logger.error(f"🔥 Startup error: {e}")
        import traceback
        uvicorn_logger.error(f"Full traceback: {traceback.format_exc()}")
        raise

# FastAPI app setup
app = FastAPI(
    title="Markov Chain API",
    description="Bigram transition store and weighted random-walk text generation",
    version="1.0.0",
    lifespan=lifespan
)

# CORS Middleware Setup
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API Router Setup
app.include_router(api_router, prefix="/api/v1")

@app.get("/")
def read_root():
    """Root endpoint with API information."""
    return {
        "message": "Markov Chain API is running!",
        "version": "1.0.0",
        "features": [
            "Bigram transition lookup",
            "Atomic bulk rebuild",
            "Weighted random-walk generation",
            "Topic-conditioned generation",
        ],
        "docs": "/docs",
        "health": "/health"
    }

@app.get("/health")
def health_check():
    """Health check with store status."""
    try:
        initializer = getattr(app.state, "initializer", None)
        if initializer is None:
            return {"status": "initializing", "version": "1.0.0"}

        summary = initializer.get_initialization_summary()
        return {
            "status": "healthy" if "error" not in summary else "error",
            "version": "1.0.0",
            "components": summary,
        }
    except Exception as e:
        return {
            "status": "error",
            "error": str(e),
            "version": "1.0.0"
        }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
