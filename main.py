"""
Kweezy Reader API - FastAPI application entry point
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from kweezy.core.config import settings
from kweezy.core.exceptions import register_exception_handlers
from kweezy.core.logging import setup_logging
from kweezy.db.database import init_db
from kweezy.api import auth, content, interactions, progress, blog, admin

setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    yield


# Create the FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Reading platform backend API",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"]
)

register_exception_handlers(app)

# Routers
app.include_router(auth.router)
app.include_router(content.router)
app.include_router(interactions.router)
app.include_router(progress.router)
app.include_router(blog.router)
app.include_router(admin.router)


@app.get("/")
async def root():
    """Root path"""
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "message": "Kweezy Reader API is running"
    }


@app.get("/health")
async def health_check():
    """Health check"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=3001,
        reload=settings.DEBUG
    )
