# scripts/seed_data.py
import asyncio
from app.core.appwrite import AppwriteGateway
from app.schemas.seed import SeedStatus
from app.services.seed_service import run_seed


async def main() -> int:
    try:
        backend = AppwriteGateway.from_config()
    except RuntimeError as e:
        print(f"Cannot seed: {e}")
        return 1

    report = await run_seed(backend)

    print(f"Seed run {report.status.value}.")
    print(f"Categories: {report.created.categories}, customizations: {report.created.customizations}")
    print(f"Menu items: {report.created.menu}, links: {report.created.menu_customizations}, images: {report.created.files}")
    for warning in report.warnings:
        print("WARNING:", warning)
    if report.error:
        print("ERROR:", report.error)
    return 0 if report.status == SeedStatus.COMPLETED else 1

if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
