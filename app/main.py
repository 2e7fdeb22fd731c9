import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, status
from fastapi.responses import HTMLResponse
from app.api.v1.seed import router as seed_router
from app.core.config import APPWRITE_ENDPOINT, DATABASE_ID, BUCKET_ID, PROJECT_NAME, VERSION
from app.core.exception_handlers import setup_exception_handlers

log = logging.getLogger("uvicorn")

# One screen, one control. Failures only reach the browser console.
SEED_PAGE = """<!DOCTYPE html>
<html>
  <head><title>Seed</title></head>
  <body>
    <button id="seed" type="button">Seed</button>
    <script>
      document.getElementById("seed").addEventListener("click", function () {
        fetch("/api/v1/seed", { method: "POST" })
          .then(function (res) {
            if (!res.ok) { throw new Error("HTTP " + res.status); }
            console.log("seeding started");
          })
          .catch(function (error) { console.log("failed to seed the databases", error); });
      });
    </script>
  </body>
</html>
"""


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handles startup and shutdown events."""
    log.info(f"Starting {PROJECT_NAME} v{VERSION} (endpoint={APPWRITE_ENDPOINT}, database={DATABASE_ID}, bucket={BUCKET_ID})")
    yield
    log.info(f"{PROJECT_NAME} stopped.")

app = FastAPI(
    title=PROJECT_NAME,
    version=VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.include_router(seed_router, prefix="/api/v1/seed", tags=["Seeding"])

setup_exception_handlers(app)


@app.get("/", response_class=HTMLResponse)
async def seed_page():
    """Single-button page that triggers a seed run."""
    return SEED_PAGE


@app.get("/health", status_code=status.HTTP_200_OK)
async def health_check():
    """Simple health check endpoint."""
    return {"status": "ok", "app_name": PROJECT_NAME}
