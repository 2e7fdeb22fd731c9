import pytest

from app.schemas.catalog import SeedDataset
from app.services.storage_service import FetchedImage
from app.testing.testing_mocks import InMemoryBackend


@pytest.fixture
def backend():
    return InMemoryBackend()


@pytest.fixture
def fetcher():
    """Image fetcher that never touches the network. URLs containing 'broken' fail."""
    async def fake_fetch(url):
        if "broken" in url:
            raise ConnectionError(f"cannot fetch {url}")
        return FetchedImage(content=b"\x89PNG fake", mime_type="image/png")
    return fake_fetch


@pytest.fixture
def pizza_dataset():
    return SeedDataset.model_validate({
        "categories": [{"name": "Pizza", "description": "Oven-baked"}],
        "customizations": [{"name": "Extra Cheese", "price": 25, "type": "topping"}],
        "menu": [{
            "name": "Margherita",
            "description": "Tomato and mozzarella",
            "image_url": "https://images.test/pizza/margherita.png",
            "price": 12.5,
            "rating": 4.6,
            "calories": 600,
            "protein": 22,
            "category_name": "Pizza",
            "customizations": ["Extra Cheese"],
        }],
    })
