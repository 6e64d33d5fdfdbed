"""
Serving scaling.

Nutrition and ingredient quantities are stored relative to a recipe's own serving
count. Scaling produces a new Recipe for display; the stored recipe is never touched.
"""

from longevity_chef.schemas.recipe import Recipe


def format_amount(quantity: float, unit: str) -> str:
    """Display string for a quantity, rounded to two decimals ("1.5 cup", "2 oz")."""
    value = round(quantity, 2)
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {unit}".strip()


def scale_factor(recipe: Recipe, target_servings: int) -> float:
    base = recipe.servings or 1
    return max(1, target_servings) / base


def scale_recipe(recipe: Recipe, target_servings: int) -> Recipe:
    """Return a copy of `recipe` rescaled to `target_servings`."""
    target_servings = max(1, target_servings)
    factor = scale_factor(recipe, target_servings)

    ingredients = []
    for ingredient in recipe.ingredients:
        if ingredient.quantity:
            quantity = ingredient.quantity * factor
            ingredients.append(ingredient.model_copy(update={
                "quantity": quantity,
                "amount": format_amount(quantity, ingredient.unit),
            }))
        else:
            # "to taste" style entries carry no quantity; keep the display text
            ingredients.append(ingredient.model_copy())

    macros = recipe.macros.model_copy(update={
        "protein": recipe.macros.protein * factor,
        "carbs": recipe.macros.carbs * factor,
        "fats": recipe.macros.fats * factor,
        "fiber": recipe.macros.fiber * factor if recipe.macros.fiber is not None else None,
    })

    return recipe.model_copy(deep=True, update={
        "servings": target_servings,
        "calories": recipe.calories * factor,
        "macros": macros,
        "ingredients": ingredients,
    })
