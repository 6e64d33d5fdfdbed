"""
Prompt builders for every generation task.

Each builder is a pure function of its inputs: it returns the system instruction, the
user message and the output schema the model is asked to follow. Nothing here talks
to the model.
"""

import json
from dataclasses import dataclass

from longevity_chef.config import get_settings
from longevity_chef.schemas.profile import UserProfile
from longevity_chef.schemas.recipe import Recipe
from longevity_chef.schemas.shopping import SHOPPING_CATEGORIES

INGREDIENT_SCHEMA = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "amount": {"type": "string", "description": "Human readable amount in IMPERIAL units, e.g. '1 cup', '4 oz'"},
        "quantity": {"type": "number", "description": "Numeric amount for scaling, e.g. 1.0"},
        "unit": {"type": "string", "description": "Unit string, e.g. 'cup', 'oz', 'lb'"},
        "category": {"type": "string"},
    },
}

RECIPE_SCHEMA = {
    "type": "object",
    "properties": {
        "id": {"type": "string"},
        "title": {"type": "string"},
        "description": {"type": "string", "description": "Short summary (max 20 words)"},
        "servings": {"type": "number"},
        "ingredients": {"type": "array", "items": INGREDIENT_SCHEMA},
        "instructions": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Step-by-step instructions. Keep concise.",
        },
        "prepTimeMinutes": {"type": "number"},
        "cookTimeMinutes": {"type": "number"},
        "calories": {"type": "number"},
        "macros": {
            "type": "object",
            "properties": {
                "protein": {"type": "number"},
                "carbs": {"type": "number"},
                "fats": {"type": "number"},
                "fiber": {"type": "number"},
            },
        },
        "healthTags": {"type": "array", "items": {"type": "string"}},
        "reasoning": {"type": "string", "description": "Brief explanation of health benefits (max 40 words)"},
    },
}

RECIPE_LIST_SCHEMA = {"type": "array", "items": RECIPE_SCHEMA}

SHOPPING_LIST_SCHEMA = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "name": {"type": "string", "description": "Name of item"},
            "amount": {"type": "string", "description": "Total quantity with unit (Imperial)"},
            "category": {"type": "string", "description": "Category (e.g. Produce)"},
            "checked": {"type": "boolean", "description": "Always false"},
            "alreadyHave": {"type": "boolean", "description": "Always false"},
            "note": {"type": "string", "description": "Optional note, e.g. 'Check pantry for existing amount'"},
        },
    },
}

DEFAULT_APPLIANCES = "Standard Kitchen (Oven/Stove)"

FOCUS_EXAMPLES = """\
Examples of Focus Application:
- "Limit Saturated Fats": Use olive oil instead of butter, lean proteins, avoid cream.
- "High Fiber": Heavy emphasis on legumes, vegetables, whole grains.
- "Anti-Inflammatory": Use turmeric, ginger, berries, fatty fish, leafy greens. Avoid processed oils.
- "Low Glycemic Index": Complex carbs only, pair with fats/proteins.
- "High Iron": Rich in leafy greens, legumes, or lean meats (if permitted), Vitamin C pairing.
- "Gut Health": Fermented foods, high fiber diversity."""


@dataclass(frozen=True)
class PromptSpec:
    """Everything needed for one model call."""
    user: str
    max_tokens: int
    system: str | None = None
    schema: dict | None = None

    def system_with_schema(self) -> str | None:
        """System instruction with the output schema appended, as the model sees it."""
        if self.schema is None:
            return self.system
        schema_text = (
            "Return valid JSON matching this schema:\n"
            + json.dumps(self.schema, indent=2)
            + "\nReturn ONLY the JSON, no markdown fences or extra text."
        )
        return f"{self.system}\n\n{schema_text}" if self.system else schema_text


def _join_or(values: list, default: str) -> str:
    return ", ".join(str(getattr(v, "value", v)) for v in values) or default


def _time_constraint(limit: int | None) -> str:
    if not limit:
        return ""
    return f"MAX COOKING TIME: The TOTAL prep + cook time MUST be under {limit} minutes."


def _use_up_context(use_up: str | None, count: int) -> str:
    if not use_up or not use_up.strip():
        return ""
    return (
        f'PRIORITY - INGREDIENTS TO USE UP: The user has these items to use: "{use_up.strip()}".\n'
        f"Task: Distribute these ingredients across the {count} recipes generated in this batch.\n"
        "- You do NOT need to use all of these ingredients in a single recipe.\n"
        "- You do NOT need to use them in every recipe.\n"
        "- Ideally, ensure at least one of the recipes utilizes some of these ingredients.\n"
        "- Example: If user has Chicken and Kale, you can make one Chicken recipe and a separate Kale recipe."
    )


# ── Bulk recipe generation ───────────────────────────────────────

def build_recipe_generation_prompt(
    profile: UserProfile,
    count: int,
    servings: int,
    use_up: str | None = None,
    max_minutes: int | None = None,
) -> PromptSpec:
    """Prompt for a batch of `count` dinner recipes tailored to the profile."""
    restrictions = _join_or(profile.dietary_restrictions, "None")
    health_goals = _join_or(profile.health_goals, "General Health")
    nutritional_focus = _join_or(profile.nutritional_focus, "Balanced")
    appliances = _join_or(profile.cooking_appliances, DEFAULT_APPLIANCES)

    time_constraint = _time_constraint(max_minutes or profile.max_cooking_minutes)
    use_up_context = _use_up_context(use_up, count)

    system = (
        "You are an expert Longevity Nutritionist and Chef. Your goal is to create personalized "
        "DINNER recipes that optimize for the user's specific health profile.\n\n"
        "CRITICAL RULES:\n"
        f"1. DIETARY RESTRICTIONS: Strictly adhere to the user's restrictions (e.g. {restrictions}). "
        'Never include forbidden ingredients. If "No Red Meat" is selected, do NOT use beef, pork, lamb, or duck.\n'
        f"2. SERVINGS: Adjust ingredient quantities for exactly {servings} servings.\n"
        "3. UNITS: ALWAYS use IMPERIAL units for ingredients (e.g. cups, oz, lbs, tbsp, tsp). "
        "DO NOT use grams or ml for ingredients.\n"
        "4. CONCISENESS: Keep descriptions, instructions, and reasoning concise to ensure the output "
        "fits within token limits.\n"
        f"5. TIME: {time_constraint or 'No strict limit.'}\n"
        f"6. APPLIANCES: The user has access to: {appliances}. "
        "Incorporate these cooking methods where appropriate/efficient.\n\n"
        "NUTRITIONAL STRATEGY:\n"
        "The user has requested the following Nutritional Focus Areas. "
        "You MUST tailor the ingredients to meet these needs:\n"
        f"- {nutritional_focus}\n\n"
        + FOCUS_EXAMPLES
    )

    override_lines = [
        f"- Dietary Restrictions: {restrictions} (STRICT ADHERENCE REQUIRED)",
        f"- Health Goals: {health_goals}",
        f"- Key Nutritional Focus: {nutritional_focus}",
        f"- Appliances Available: {appliances}",
    ]
    if time_constraint:
        override_lines.append(f"- {time_constraint}")
    if use_up_context:
        override_lines.append(f"- {use_up_context}")

    user = (
        f"Generate {count} distinct DINNER recipes based on this user profile: "
        f"{profile.model_dump_json(by_alias=True)}.\n\n"
        "Context Overrides & Specific Instructions:\n"
        f"{chr(10).join(override_lines)}\n\n"
        "Every ingredient needs a display 'amount' plus a numeric 'quantity' and 'unit' for scaling.\n"
        "Provide a specific 'reasoning' for each recipe connecting the ingredients to the user's "
        "specific nutritional focus areas and health goals."
    )

    return PromptSpec(
        system=system,
        user=user,
        schema=RECIPE_LIST_SCHEMA,
        max_tokens=get_settings().MAX_OUTPUT_TOKENS,
    )


# ── Single-recipe customization ──────────────────────────────────

def build_customization_prompt(recipe: Recipe, instruction: str, profile: UserProfile) -> PromptSpec:
    restrictions = _join_or(profile.dietary_restrictions, "None")
    focus = _join_or(profile.nutritional_focus, "None")

    user = (
        "You are an expert chef and nutritionist.\n\n"
        f"Original Recipe JSON:\n{recipe.model_dump_json(by_alias=True)}\n\n"
        f'User Instruction for Modification:\n"{instruction}"\n\n'
        f"User Dietary Restrictions (MUST MAINTAIN):\n{restrictions}\n\n"
        f"User Nutritional Focus:\n{focus}\n\n"
        "Task:\n"
        "Modify the Original Recipe based on the User Instruction.\n"
        "- Update title, ingredients, instructions, macros, and reasoning as needed.\n"
        "- Maintain the exact same JSON structure.\n"
        f'- Keep the same ID ("{recipe.id}").\n'
        "- Ensure IMPERIAL units.\n"
        f"- Ensure Servings count remains the same ({recipe.servings}) unless explicitly asked to change.\n\n"
        "Return ONLY the valid JSON object for the single recipe."
    )

    return PromptSpec(
        user=user,
        schema=RECIPE_SCHEMA,
        max_tokens=get_settings().CUSTOMIZE_MAX_TOKENS,
    )


# ── Shopping list aggregation ────────────────────────────────────

def build_shopping_list_prompt(recipes: list[Recipe], pantry: str | None = None) -> PromptSpec:
    ingredients_list = ", ".join(
        f"{i.amount} {i.name}".strip()
        for r in recipes
        for i in r.ingredients
    )
    categories = ", ".join(f'"{c}"' for c in SHOPPING_CATEGORIES)

    pantry_context = ""
    if pantry and pantry.strip():
        pantry_context = (
            f'USER PANTRY ITEMS: "{pantry.strip()}". If a generated shopping item matches one of these '
            "pantry items, set the 'note' field to \"Less the amount you already have\" or "
            '"Check pantry for existing amount".\n\n'
        )

    user = (
        f"Here is a list of ingredients from multiple recipes:\n{ingredients_list}\n\n"
        f"{pantry_context}"
        "Tasks:\n"
        "1. Combine similar items and sum up their amounts "
        '(e.g. "2 onions" + "1 onion" = "3 onions").\n'
        f"2. Categorize each item into one of these categories: {categories}.\n"
        "3. Ensure all units are displayed in IMPERIAL units (oz, lbs, cups).\n"
        "4. Set 'checked' and 'alreadyHave' to false for every item.\n\n"
        "Return a clean JSON list."
    )

    return PromptSpec(
        user=user,
        schema=SHOPPING_LIST_SCHEMA,
        max_tokens=get_settings().MAX_OUTPUT_TOKENS,
    )


# ── Single item categorization ───────────────────────────────────

def build_categorization_prompt(item_name: str) -> PromptSpec:
    user = (
        f'Categorize this shopping item: "{item_name}" into one of: '
        f"{', '.join(SHOPPING_CATEGORIES)}. Return ONLY the category name."
    )
    return PromptSpec(user=user, max_tokens=get_settings().CATEGORIZE_MAX_TOKENS)
