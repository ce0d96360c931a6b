from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv
import logging
import os

# Load environment variables
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

from app.services.Generate_Image.generate_image_route import router as generate_image_router
from app.services.Compose_Prompt.compose_prompt_route import router as compose_prompt_router
from app.services.Studio_Selections.studio_selections_route import router as studio_selections_router

# Create FastAPI app
app = FastAPI(
    title="Model Studio API",
    description="API for composing character prompts and generating catalogue model images",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure this properly in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(generate_image_router, prefix="/api")
app.include_router(compose_prompt_router, prefix="/api")
app.include_router(studio_selections_router, prefix="/api")


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies get the same {"error": ...} envelope as every other failure"""
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", []) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else first.get("msg", "Invalid request")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


@app.get("/")
async def root():
    """Root endpoint with API information"""
    return {
        "message": "Welcome to Model Studio API",
        "version": "1.0.0",
        "docs": "/docs",
        "services": {
            "generate": "/api/generate",
            "compose_prompt": "/api/compose_prompt",
            "prompt_options": "/api/prompt_options",
            "selections": "/api/selections"
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "message": "API is running"}


@app.on_event("startup")
async def startup_event():
    """Refuse to start without provider credentials"""
    if not os.getenv("REPLICATE_API_TOKEN"):
        logger.error("REPLICATE_API_TOKEN not found in environment variables")
        raise RuntimeError("Missing REPLICATE_API_TOKEN environment variable.")
    logger.info("API configuration loaded successfully")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=int(os.getenv("PORT", 8000)), reload=True)
