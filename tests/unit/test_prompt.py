from __future__ import annotations

from spark.app.domain.models import LaunchSource, RecipeSettings, SourceInfo
from spark.services.prompt import (
    DEFAULT_EXCLUSIONS,
    DEFAULT_PROMPT_STYLE,
    PromptBuilder,
    PromptDefaults,
    render_template,
)


class TestRenderTemplate:
    def test_leaves_json_braces_alone(self) -> None:
        rendered = render_template('{"mini_ideas": []} for {name}', name="Alpha")
        assert rendered == '{"mini_ideas": []} for Alpha'

    def test_unknown_placeholders_are_kept(self) -> None:
        assert render_template("{missing}") == "{missing}"


class TestPromptBuilder:
    def test_defaults_apply_without_settings(self) -> None:
        prompt = PromptBuilder().build_single(
            SourceInfo(name="Alpha", description="Alpha does things", url="https://alpha.example")
        )
        assert DEFAULT_PROMPT_STYLE in prompt
        for topic in DEFAULT_EXCLUSIONS:
            assert f"- NO ideas involving {topic}" in prompt
        assert "Name: Alpha" in prompt
        assert "URL: https://alpha.example" in prompt

    def test_recipe_settings_override_defaults(self) -> None:
        settings = RecipeSettings(prompt_style="Only CLI tools", exclusions=["crypto"])
        prompt = PromptBuilder().build_single(SourceInfo(name="A", description="B", url="#prompt"), settings)
        assert "Only CLI tools" in prompt
        assert "- NO ideas involving crypto" in prompt
        assert DEFAULT_PROMPT_STYLE not in prompt
        assert "URL:" not in prompt

    def test_blank_style_falls_back(self) -> None:
        builder = PromptBuilder()
        assert builder.style_for(RecipeSettings(prompt_style="   ")) == DEFAULT_PROMPT_STYLE

    def test_batch_lists_every_launch(self) -> None:
        launches = [
            LaunchSource(name="Alpha", tagline="Fast notes", description="", url="u1", upvotes=3),
            LaunchSource(name="Beta", tagline="Slow mail", description="", url="u2", upvotes=2),
        ]
        prompt = PromptBuilder().build_batch(launches)
        assert "1. Alpha - Fast notes" in prompt
        assert "2. Beta - Slow mail" in prompt
        assert "one object for each product (2 total)" in prompt
        assert '"mini_ideas"' in prompt

    def test_idea_count_comes_from_defaults(self) -> None:
        builder = PromptBuilder(PromptDefaults(ideas_per_source=5))
        prompt = builder.build_single(SourceInfo(name="A", description="B", url="#prompt"))
        assert "generate 5 unique project ideas" in prompt

    def test_image_prompt_includes_context(self) -> None:
        prompt = PromptBuilder().build_image("a kanban board")
        assert "Additional context: a kanban board" in prompt
        assert '"source_name"' in prompt

    def test_image_prompt_without_context(self) -> None:
        assert "Additional context" not in PromptBuilder().build_image(None)
