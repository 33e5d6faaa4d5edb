"""
Prompts for recipe extraction and alternative-measurement enrichment.

Every provider receives the same system and user prompts. Preserving the
source language and measurement system is only enforced here, in the prompt.
"""

SYSTEM_PROMPT = (
    "You are a recipe extraction assistant. You extract recipes from web page "
    "content and answer with valid JSON only. You never translate the recipe "
    "and never convert its units."
)

EXTRACTION_PROMPT = """Extract the recipe from the provided content and return it as valid JSON.

Return ONLY a JSON object with this exact structure (no markdown, no code blocks, just pure JSON):
{
  "title": "Recipe title",
  "description": "Brief description of the dish (1-2 sentences)",
  "baseServings": <number of servings as integer>,
  "ingredients": [
    {
      "name": "ingredient name",
      "quantity": <number>,
      "unit": "unit of measurement (e.g., cups, tbsp, g, pieces)",
      "notes": "optional notes like 'diced' or 'room temperature'"
    }
  ],
  "steps": [
    {
      "title": "Short label for the step (e.g., 'Cook the pasta')",
      "instruction": "Complete instruction that is sufficient to perform the step without expanding details (e.g., 'Boil in salted water and cook 2 minutes less than package time.')",
      "details": "Optional learn-more content: tips, substitutions, technique notes, troubleshooting (optional)",
      "duration": "estimated time like '5 minutes' (optional)"
    }
  ],
  "warnings": ["Important tips or warnings to know before starting"]
}

CRITICAL RULES:
- DO NOT TRANSLATE - Keep the title, ingredient names, units, steps and warnings in the ORIGINAL LANGUAGE of the recipe
- DO NOT CONVERT UNITS - Keep every quantity in the measurement system used by the recipe (e.g., keep "EL", "TL", "dl", "cups" or "oz" exactly as written)
- For "quantity", use decimal numbers (0.5 instead of 1/2, 0.25 instead of 1/4, 0.333 instead of 1/3)
- For items like "2-3 cloves garlic", use the lower number (2) and add the range in notes
- For "to taste" or "as needed", use 0 for quantity and put the description in notes
- If an ingredient line contains both metric and imperial measurements (e.g., "1.75kg/ 3.5lb"), use ONLY the first one listed
- Keep "title" of each step concise (under 6 words). The "instruction" must be actionable and complete.
- Put optional substitution tips, technique notes, or common mistakes in the "details" field as "learn more"
- "warnings" should include: allergens, equipment needed, prep time requirements, items that need advance preparation
- If servings aren't specified, estimate based on the recipe

Extract the recipe from the following content:"""

ALTERNATIVES_PROMPT = """For each ingredient below, suggest alternative measurements a cook might have tools for.

Return ONLY a JSON object with this exact structure (no markdown, no code blocks, just pure JSON):
{
  "alternatives": [
    [
      {"quantity": <number>, "unit": "unit", "exact": <true|false>, "note": "optional qualifier"}
    ]
  ]
}

RULES:
- "alternatives" MUST contain exactly one list per ingredient, in the SAME ORDER as the ingredients below ({count} lists)
- Use an empty list when no sensible alternative exists (e.g., "2 eggs", "salt to taste")
- At most 3 alternatives per ingredient, and never repeat the ingredient's own unit
- Quantities are for the same amount as the ingredient, as decimal numbers
- "exact": true ONLY for fixed-ratio conversions (e.g., tbsp to ml, oz to g)
- "exact": false for estimates that depend on the ingredient's density (e.g., cups of flour to grams); explain the assumption in "note"
- Write units and notes in the language of the recipe

Ingredients (index: quantity unit name):
{ingredients}"""


def build_extraction_prompt(content: str) -> str:
    """Build the user prompt for the primary extraction call."""
    return f"{EXTRACTION_PROMPT}\n\n{content}"


def build_alternatives_prompt(ingredients: list[dict]) -> str:
    """Build the user prompt for the alternative-measurement pass."""
    lines = []
    for index, ingredient in enumerate(ingredients):
        quantity = ingredient.get("quantity") or 0
        parts = [f"{quantity:g}" if quantity else "-", ingredient.get("unit") or "-",
                 ingredient.get("name") or ""]
        notes = ingredient.get("notes")
        line = f"{index}: {' '.join(parts)}"
        if notes:
            line += f" ({notes})"
        lines.append(line)

    # The prompt contains literal JSON braces, so str.format is not usable
    return (ALTERNATIVES_PROMPT
            .replace("{count}", str(len(ingredients)))
            .replace("{ingredients}", "\n".join(lines)))
