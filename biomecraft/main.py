"""
BiomeCraft - FastAPI Application Entry Point
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from biomecraft.api import generate
from biomecraft.config import APP_NAME, APP_VERSION, get_cors_origins

app = FastAPI(
    title=APP_NAME,
    description="Generate Minecraft biome datapacks from natural-language descriptions",
    version=APP_VERSION,
)

# Configure CORS for browser clients
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[
        "Content-Disposition",
        "X-Biome-Name",
        "X-Biome-Temperature",
        "X-Biome-Downfall",
        "X-Biome-Preview",
    ],
)

app.include_router(generate.router, prefix="/api", tags=["biomes"])


@app.get("/")
async def root():
    """Health check endpoint"""
    return {"status": "ok", "name": APP_NAME, "version": APP_VERSION}
