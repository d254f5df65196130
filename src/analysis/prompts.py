# src/analysis/prompts.py — v1
"""Growth-analysis prompt for the vision model."""

from __future__ import annotations

_LANGUAGE_INSTRUCTIONS = {
    "en": "Respond in English.",
    "hi": "Respond in Hindi (हिंदी).",
    "mr": "Respond in Marathi (मराठी).",
}

_RESPONSE_TEMPLATE = """{
  "growthStage": "germination/vegetative/flowering/fruiting/maturity",
  "healthScore": 85,
  "issues": ["list any problems detected"],
  "observations": "detailed visual observations",
  "recommendations": ["specific actionable advice"],
  "nextPhotoDays": 4,
  "urgency": "routine/important/critical/urgent"
}"""


def build_growth_prompt(
    crop_type: str,
    day_number: int,
    previous_summary: str | None = None,
    language: str = "en",
) -> str:
    """Prompt asking for a JSON growth analysis of one crop photo."""
    lang_instruction = _LANGUAGE_INSTRUCTIONS.get(language, _LANGUAGE_INSTRUCTIONS["en"])

    if previous_summary:
        history = f"PREVIOUS ANALYSIS (Day {day_number - 3}): {previous_summary}"
    else:
        history = "This is the first photo analysis."

    return f"""{lang_instruction}

You are analyzing a {crop_type} plant on day {day_number} of growth.

{history}

ANALYZE THE CURRENT PHOTO:
1. Identify current growth stage (germination/vegetative/flowering/fruiting/maturity)
2. Assess plant health (0-100 score)
3. Estimate plant height and leaf development
4. Detect any issues (diseases, pests, nutrient deficiency, water stress)
5. Compare with previous analysis if available
6. Provide specific farming recommendations
7. Determine when the next photo should be uploaded (3-7 days)

RESPOND IN JSON FORMAT:
{_RESPONSE_TEMPLATE}

Focus on practical farming advice for {crop_type} cultivation."""
