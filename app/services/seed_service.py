import logging
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from app.core.config import (
    ABORT_ON_RESET_FAILURE,
    CATEGORIES_COLLECTION_ID,
    CUSTOMIZATIONS_COLLECTION_ID,
    MENU_COLLECTION_ID,
    MENU_CUSTOMIZATIONS_COLLECTION_ID,
)
from app.core.throttle import Throttle, default_create_throttle, default_upload_throttle
from app.data.dummy_data import load_dataset
from app.schemas.catalog import Category, Customization, MenuItem, SeedDataset
from app.schemas.seed import (
    ItemOutcome,
    LinkSkip,
    MenuItemResult,
    SeedReport,
    SeedStatus,
    SkipReason,
)
from app.services.reset_service import clear_collection, clear_storage
from app.services.storage_service import fetch_image, rehost_image

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
log = logging.getLogger("seeder")

# Link rows are cleared with the rest; no foreign keys are enforced remotely
RESET_ORDER = [
    CATEGORIES_COLLECTION_ID,
    CUSTOMIZATIONS_COLLECTION_ID,
    MENU_COLLECTION_ID,
    MENU_CUSTOMIZATIONS_COLLECTION_ID,
]


async def reset_backend(backend) -> List[str]:
    """Empties all four collections and the bucket. Returns the names of the parts that failed."""
    failures = []
    for collection_id in RESET_ORDER:
        if not await clear_collection(backend, collection_id):
            failures.append(collection_id)
    if not await clear_storage(backend):
        failures.append("storage")
    return failures


async def seed_categories(
    backend, categories: List[Category], throttle: Throttle, report: Optional[SeedReport] = None
) -> Dict[str, str]:
    """
    Creates categories one at a time, in source order. Returns name -> document ID.
    Each create is recorded on `report` as it happens.
    """
    report = report if report is not None else SeedReport()
    for cat in categories:
        report.category_ids[cat.name] = await backend.create_document(
            CATEGORIES_COLLECTION_ID,
            {"name": cat.name, "description": cat.description},
        )
        report.created.categories += 1
        await throttle.wait()
    log.info(f"Created {len(categories)} categories.")
    return report.category_ids


async def seed_customizations(
    backend, customizations: List[Customization], throttle: Throttle, report: Optional[SeedReport] = None
) -> Dict[str, str]:
    report = report if report is not None else SeedReport()
    for cus in customizations:
        report.customization_ids[cus.name] = await backend.create_document(
            CUSTOMIZATIONS_COLLECTION_ID,
            {"name": cus.name, "price": cus.price, "type": cus.type},
        )
        report.created.customizations += 1
        await throttle.wait()
    log.info(f"Created {len(customizations)} customizations.")
    return report.customization_ids


def _skip_item(report: SeedReport, name: str, reason: SkipReason) -> MenuItemResult:
    result = MenuItemResult.skipped(name, reason)
    report.items.append(result)
    report.warnings.append(f"Skipped {name}: {reason.value}")
    return result


async def seed_menu_item(
    backend,
    item: MenuItem,
    category_ids: Dict[str, str],
    customization_ids: Dict[str, str],
    throttle: Throttle,
    upload_throttle: Throttle,
    fetcher: Callable = fetch_image,
    report: Optional[SeedReport] = None,
) -> MenuItemResult:
    """
    Creates one menu document and its customization links.

    Unknown category or a failed image upload skips the whole item. An unknown
    customization skips only that link. Any other backend error propagates,
    after everything already written has been recorded on `report`.
    """
    report = report if report is not None else SeedReport()

    category_id = category_ids.get(item.category_name)
    if not category_id:
        log.warning(f"Skipped {item.name}: Category '{item.category_name}' not found.")
        return _skip_item(report, item.name, SkipReason.CATEGORY_NOT_FOUND)

    try:
        image_url = await rehost_image(backend, item.image_url, upload_throttle, fetcher)
    except Exception:
        log.warning(f"Skipped {item.name}: Image upload failed.")
        return _skip_item(report, item.name, SkipReason.IMAGE_UPLOAD_FAILED)
    report.created.files += 1

    menu_id = await backend.create_document(
        MENU_COLLECTION_ID,
        {
            "name": item.name,
            "description": item.description,
            "image_url": image_url,
            "price": item.price,
            "rating": item.rating,
            "calories": item.calories,
            "protein": item.protein,
            "categories": category_id,
        },
    )
    result = MenuItemResult(
        name=item.name, outcome=ItemOutcome.CREATED, document_id=menu_id, image_url=image_url
    )
    report.items.append(result)
    report.created.menu += 1
    await throttle.wait()

    for cus_name in item.customizations:
        customization_id = customization_ids.get(cus_name)
        if not customization_id:
            log.warning(f"Skipped customization '{cus_name}' for {item.name}")
            result.skipped_links.append(LinkSkip(customization_name=cus_name))
            report.warnings.append(f"Skipped customization '{cus_name}' for {item.name}")
            continue

        link_id = await backend.create_document(
            MENU_CUSTOMIZATIONS_COLLECTION_ID,
            {"menu": menu_id, "customizations": customization_id},
        )
        result.link_ids.append(link_id)
        report.created.menu_customizations += 1
        await throttle.wait()

    return result


async def seed_menu(
    backend,
    menu: List[MenuItem],
    category_ids: Dict[str, str],
    customization_ids: Dict[str, str],
    throttle: Throttle,
    upload_throttle: Throttle,
    fetcher: Callable = fetch_image,
    report: Optional[SeedReport] = None,
) -> List[MenuItemResult]:
    report = report if report is not None else SeedReport()
    for item in menu:
        await seed_menu_item(
            backend, item, category_ids, customization_ids, throttle, upload_throttle, fetcher, report
        )
    return report.items


async def run_seed(
    backend,
    dataset: Optional[SeedDataset] = None,
    throttle: Optional[Throttle] = None,
    upload_throttle: Optional[Throttle] = None,
    fetcher: Callable = fetch_image,
    abort_on_reset_failure: Optional[bool] = None,
) -> SeedReport:
    """
    Clears the backend and rebuilds it from the dataset.

    Never raises: an unexpected failure is logged and the returned report has
    status FAILED. Writes made before the failure are not rolled back.
    """
    report = SeedReport()
    throttle = throttle or default_create_throttle()
    upload_throttle = upload_throttle or default_upload_throttle()
    if abort_on_reset_failure is None:
        abort_on_reset_failure = ABORT_ON_RESET_FAILURE

    try:
        if dataset is None:
            dataset = load_dataset()

        # Step 1: Clear all existing data
        report.reset_failures = await reset_backend(backend)
        if report.reset_failures:
            if abort_on_reset_failure:
                report.status = SeedStatus.ABORTED
                report.error = f"Reset failed for: {', '.join(report.reset_failures)}"
                log.error(f"Seeding aborted. {report.error}")
                return report
            report.warnings.append(
                f"Reset failed for {', '.join(report.reset_failures)}; seeding over existing data."
            )

        # Step 2 and 3: Categories and customizations
        await seed_categories(backend, dataset.categories, throttle, report)
        await seed_customizations(backend, dataset.customizations, throttle, report)

        # Step 4: Menu items and their links
        await seed_menu(
            backend,
            dataset.menu,
            report.category_ids,
            report.customization_ids,
            throttle,
            upload_throttle,
            fetcher,
            report,
        )
        log.info(
            f"Seeding complete. {report.created.menu}/{len(dataset.menu)} menu items, "
            f"{report.created.menu_customizations} links, {len(report.warnings)} warnings."
        )
    except Exception as e:
        log.exception("Failed to seed the databases")
        report.status = SeedStatus.FAILED
        report.error = str(e)
    finally:
        report.finished_at = datetime.now(timezone.utc)

    return report
