import logging
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from app.core.appwrite import AppwriteGateway
from app.core.config import (
    CATEGORIES_COLLECTION_ID,
    CUSTOMIZATIONS_COLLECTION_ID,
    MENU_COLLECTION_ID,
    MENU_CUSTOMIZATIONS_COLLECTION_ID,
)
from app.schemas.response import SuccessResponse
from app.schemas.seed import SeedCounts, SeedStatus
from app.services.seed_service import run_seed

log = logging.getLogger("uvicorn")
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

router = APIRouter()


def get_backend() -> AppwriteGateway:
    """Builds the Appwrite gateway for a request. Overridden in tests."""
    try:
        return AppwriteGateway.from_config()
    except RuntimeError as e:
        log.error(f"Appwrite is not configured: {e}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))


async def _seed_in_background(backend):
    report = await run_seed(backend)
    if report.status == SeedStatus.COMPLETED:
        log.info(f"Background seed finished with {len(report.warnings)} warnings.")
    else:
        log.error(f"failed to seed the databases: {report.error}")


@router.post("", status_code=status.HTTP_202_ACCEPTED, response_model=SuccessResponse)
async def trigger_seed_endpoint(background_tasks: BackgroundTasks, backend=Depends(get_backend)):
    """
    Starts a seed run and returns immediately (202). The outcome is only logged.
    """
    background_tasks.add_task(_seed_in_background, backend)
    log.info("Seed run scheduled.")
    return SuccessResponse(message="Seeding started.")


@router.post("/run", response_model=SuccessResponse)
async def run_seed_endpoint(backend=Depends(get_backend)):
    """Runs the seed inline and returns the full report, including skipped items."""
    report = await run_seed(backend)
    return SuccessResponse(
        success=report.status == SeedStatus.COMPLETED,
        message=f"Seed run {report.status.value}.",
        data=report.model_dump(mode="json"),
    )


@router.get("/counts", response_model=SuccessResponse)
async def seed_counts_endpoint(backend=Depends(get_backend)):
    """Current number of documents per collection and files in the bucket."""
    counts = SeedCounts(
        categories=await backend.count_documents(CATEGORIES_COLLECTION_ID),
        customizations=await backend.count_documents(CUSTOMIZATIONS_COLLECTION_ID),
        menu=await backend.count_documents(MENU_COLLECTION_ID),
        menu_customizations=await backend.count_documents(MENU_CUSTOMIZATIONS_COLLECTION_ID),
        files=await backend.count_files(),
    )
    return SuccessResponse(data=counts.model_dump())
