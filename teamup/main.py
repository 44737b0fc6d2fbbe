# teamup/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from teamup.config import settings
from teamup.database import Base, engine
from teamup.api import admin, auth, connections, profile, recommendations, skill

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Create database tables
Base.metadata.create_all(bind=engine)

# Initialize FastAPI app
app = FastAPI(title="TeamUp API")

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routers
app.include_router(auth.router)             # /auth/*
app.include_router(profile.router)          # /profile/*
app.include_router(skill.router)            # /skills, /interests
app.include_router(connections.router)      # /connections/*
app.include_router(recommendations.router)  # /recommendations/*
app.include_router(admin.router)            # /admin/*


@app.get("/health")
def health_check():
    return {
        "status": "healthy",
        "message": "TeamUp API is running",
        "version": "1.0.0",
    }
