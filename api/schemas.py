"""
Pydantic schemas for FastAPI responses.

- DishResponse: body of POST /api/generateDish (camelCase keys on the wire,
  as expected by the page script)
- HealthResponse: body of GET /health
"""

from pydantic import BaseModel, ConfigDict, Field

from dishpicker.models import RecipeRecord


class DishResponse(BaseModel):
    """
    Dish payload returned by the action endpoint.

    On errors dish_name carries the user-facing message and every other field
    is an empty string.
    """
    dish_name: str = Field(..., alias="dishName", description="Recipe title or status message")
    dish_image_url: str = Field("", alias="dishImageUrl", description="Food image URL")
    recipe_description: str = Field("", alias="recipeDescription", description="Recipe description")
    recipe_material: str = Field("", alias="recipeMaterial", description="Ingredients joined with '、'")
    recipe_url: str = Field("", alias="recipeUrl", description="Recipe page URL")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "dishName": "Miso soup",
                "dishImageUrl": "https://image.space.rakuten.co.jp/d/strg/ctrl/3/example.jpg",
                "recipeDescription": "A simple weeknight soup.",
                "recipeMaterial": "tofu、wakame、miso",
                "recipeUrl": "https://recipe.rakuten.co.jp/recipe/1234567890/",
            }
        },
    )

    @classmethod
    def from_recipe(cls, recipe: RecipeRecord) -> "DishResponse":
        return cls(
            dish_name=recipe.title,
            dish_image_url=recipe.image_url,
            recipe_description=recipe.description,
            recipe_material=recipe.ingredients_text,
            recipe_url=recipe.url,
        )

    @classmethod
    def message(cls, text: str) -> "DishResponse":
        return cls(dish_name=text)


class HealthResponse(BaseModel):
    """Health check payload."""
    status: str = Field("ok", description="Always 'ok' when the endpoint is reachable")
    name: str
    version: str
    load_status: str = Field(..., description="Category load status: loading, ready or failed")
    message: str = Field(..., description="Current status message")
    medium_categories: int = Field(0, ge=0)
    small_categories: int = Field(0, ge=0)
    uptime_seconds: int = Field(..., ge=0)
