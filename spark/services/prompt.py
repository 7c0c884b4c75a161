"""Instruction templates and the builder that renders them."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Sequence

from spark.app.domain.models import LaunchSource, RecipeSettings, SourceInfo

DEFAULT_PROMPT_STYLE = (
    "Focus on web apps or Chrome extensions that are buildable in a weekend. "
    "AI agent ideas are encouraged - automations, bots, or AI-powered tools."
)

DEFAULT_EXCLUSIONS = (
    "embedding external content (TikTok, YouTube, etc.)",
    "video generation tools",
    "A/B testing tools",
)

_PLACEHOLDER = re.compile(r"\{(\w+)\}")

_GUIDELINES = """IMPORTANT GUIDELINES:
- Ideas should be buildable by a solo developer in a weekend
- {style}
{exclusions}
- Don't just simplify the original product - create something NEW inspired by the core concept
- Each idea should be 1-2 sentences describing what it does and why it's useful
- Be specific and actionable"""

_TITLE_RULES = """For title_summaries:
- Create a concise title for each idea (MAXIMUM 6 WORDS)
- The title should capture the essence of the idea
- Make it catchy and descriptive
- Each title should correspond to the idea at the same index in mini_ideas array"""

BATCH_TEMPLATE = """You are a creative indie hacker looking for weekend project ideas. Analyze these top {product_count} Product Hunt launches and use them as INSPIRATION to generate {idea_count} unique project ideas for each.

{guidelines}

Products:
{products}

Return a JSON array with this structure - one object for each product ({product_count} total):
[
  {
    "mini_ideas": ["first idea", "second idea", "third idea"],
    "title_summaries": ["Short Title 1", "Short Title 2", "Short Title 3"]
  }
]

{title_rules}"""

SINGLE_TEMPLATE = """You are a creative indie hacker looking for weekend project ideas. Analyze this inspiration source and generate {idea_count} unique project ideas.

INSPIRATION SOURCE:
Name: {source_name}
Description: {source_description}
{source_url_line}

{guidelines}

Return a JSON object with this structure:
{
  "mini_ideas": ["first idea", "second idea", "third idea"],
  "title_summaries": ["Short Title 1", "Short Title 2", "Short Title 3"]
}

{title_rules}"""

IMAGE_TEMPLATE = """Analyze this image/screenshot and generate {idea_count} unique weekend project ideas inspired by what you see.

{context_line}

{guidelines}

Return a JSON object with this structure:
{
  "source_name": "Brief name describing what's in the image",
  "source_description": "One sentence describing the image content",
  "mini_ideas": ["first idea", "second idea", "third idea"],
  "title_summaries": ["Short Title 1", "Short Title 2", "Short Title 3"]
}

{title_rules}"""


def render_template(template: str, **values: object) -> str:
    """Substitute `{name}` placeholders; unknown names and JSON braces are left alone."""

    def _replace(match: re.Match[str]) -> str:
        key = match.group(1)
        if key in values:
            return str(values[key])
        return match.group(0)

    return _PLACEHOLDER.sub(_replace, template)


@dataclass(frozen=True)
class PromptDefaults:
    """Baseline prompt settings; a recipe overrides them field by field."""
    prompt_style: str = DEFAULT_PROMPT_STYLE
    exclusions: tuple[str, ...] = DEFAULT_EXCLUSIONS
    ideas_per_source: int = 3


class PromptBuilder:
    def __init__(self, defaults: PromptDefaults | None = None) -> None:
        self.defaults = defaults or PromptDefaults()

    def style_for(self, settings: RecipeSettings | None) -> str:
        if settings and settings.prompt_style and settings.prompt_style.strip():
            return settings.prompt_style.strip()
        return self.defaults.prompt_style

    def exclusions_for(self, settings: RecipeSettings | None) -> list[str]:
        if settings and settings.exclusions:
            return list(settings.exclusions)
        return list(self.defaults.exclusions)

    def guidelines(self, settings: RecipeSettings | None) -> str:
        exclusion_lines = "\n".join(
            f"- NO ideas involving {topic}" for topic in self.exclusions_for(settings)
        )
        return render_template(
            _GUIDELINES,
            style=self.style_for(settings),
            exclusions=exclusion_lines,
        )

    def build_batch(self, launches: Sequence[LaunchSource], settings: RecipeSettings | None = None) -> str:
        products = "\n".join(
            f"{index}. {launch.name} - {launch.tagline}"
            for index, launch in enumerate(launches, start=1)
        )
        return render_template(
            BATCH_TEMPLATE,
            product_count=len(launches),
            idea_count=self.defaults.ideas_per_source,
            guidelines=self.guidelines(settings),
            products=products,
            title_rules=_TITLE_RULES,
        )

    def build_single(self, source: SourceInfo, settings: RecipeSettings | None = None) -> str:
        url = source.url if source.url and not source.url.startswith("#") else ""
        return render_template(
            SINGLE_TEMPLATE,
            idea_count=self.defaults.ideas_per_source,
            source_name=source.name,
            source_description=source.description,
            source_url_line=f"URL: {url}" if url else "",
            guidelines=self.guidelines(settings),
            title_rules=_TITLE_RULES,
        )

    def build_image(self, auxiliary_text: str | None = None, settings: RecipeSettings | None = None) -> str:
        context = (auxiliary_text or "").strip()
        return render_template(
            IMAGE_TEMPLATE,
            idea_count=self.defaults.ideas_per_source,
            context_line=f"Additional context: {context}" if context else "",
            guidelines=self.guidelines(settings),
            title_rules=_TITLE_RULES,
        )
