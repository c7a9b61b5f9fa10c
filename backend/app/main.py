from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .api.recipes import router as recipes_router
from .core.config import Settings, get_settings

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

app = FastAPI(title="kitchen-buddy", version="0.1.0", description="Recipe suggestions from the ingredients you have")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(recipes_router)


@app.get("/api/health")
async def health_check(current: Settings = Depends(get_settings)):
    return {"status": "ok", "message": "kitchen-buddy API is running", "openai_configured": bool(current.openai_api_key)}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.port)
