from typing import List
from pydantic import BaseModel, Field


class Category(BaseModel):
    """Menu category (e.g., Burgers). Referenced by menu items through its name."""
    name: str
    description: str


class Customization(BaseModel):
    """Add-on selectable for a menu item."""
    name: str
    price: float = Field(..., ge=0)
    # Known types are topping, side, size and crust; any other label is accepted
    type: str


class MenuItem(BaseModel):
    name: str
    description: str
    image_url: str = Field(..., description="Source image, re-hosted into the storage bucket while seeding.")
    price: float = Field(..., ge=0)
    rating: float
    calories: int
    protein: int
    category_name: str
    customizations: List[str] = Field(default_factory=list, description="Names of linked customizations.")


class SeedDataset(BaseModel):
    """The static catalog a seed run rebuilds the backend from."""
    categories: List[Category] = Field(default_factory=list)
    customizations: List[Customization] = Field(default_factory=list)
    menu: List[MenuItem] = Field(default_factory=list)
