"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
They don't validate correctness deeply - just that commands work. The
model client is always the fake from conftest.py.

Usage:
    pytest tests/smoke/test_cli_commands.py -v
    pytest tests/smoke/test_cli_commands.py -v -m smoke
"""

import json

import pytest
from typer.testing import CliRunner

from src.cli.main import app

# Mark all tests in this module as smoke tests
pytestmark = pytest.mark.smoke

runner = CliRunner()


@pytest.fixture
def use_settings(monkeypatch):
    """Point the CLI at the given settings and keep loguru sinks untouched."""
    monkeypatch.setattr("src.cli.main.configure_logging", lambda *args, **kwargs: None)

    def apply(settings):
        monkeypatch.setattr("src.cli.main.get_settings", lambda: settings)

    return apply


@pytest.fixture
def fake_pipeline(monkeypatch, client_factory):
    """Route the generator's default client to the fake."""
    monkeypatch.setattr("src.generation.lesson_generator.GeminiClient", client_factory)
    return client_factory


class TestCLIHelp:
    """Test that help commands work."""

    def test_main_help(self, use_settings, settings):
        use_settings(settings)

        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "generate" in result.output
        assert "config" in result.output

    def test_generate_help(self, use_settings, settings):
        use_settings(settings)

        result = runner.invoke(app, ["generate", "--help"])

        assert result.exit_code == 0
        assert "--document" in result.output
        assert "--grounding" in result.output

    def test_version(self, use_settings, settings):
        use_settings(settings)

        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "animal-academy" in result.output


class TestCLIConfig:
    """Test the config command."""

    def test_key_masked(self, use_settings, settings):
        use_settings(settings)

        result = runner.invoke(app, ["config"])

        assert result.exit_code == 0
        assert settings.gemini_api_key not in result.output
        assert "gemini-2.5-flash" in result.output

    def test_missing_key_warning(self, use_settings, unconfigured_settings):
        use_settings(unconfigured_settings)

        result = runner.invoke(app, ["config"])

        assert result.exit_code == 0
        assert "Not set" in result.output
        assert "GEMINI_API_KEY" in result.output


class TestCLIGenerate:
    """Test the generate command against the fake model client."""

    def test_generate_prints_lesson(self, use_settings, settings, fake_pipeline):
        use_settings(settings)

        result = runner.invoke(app, ["generate", "Photosynthesis"])

        assert result.exit_code == 0, result.output
        assert "Franklin D. Roosevelt" in result.output
        assert "Professor Owl explains step 1." in result.output
        assert "Chlorophyll" in result.output
        assert "Calvin cycle" in result.output
        assert fake_pipeline.calls == 1

    def test_generate_writes_exports(self, use_settings, settings, fake_pipeline, tmp_path):
        use_settings(settings)
        json_path = tmp_path / "lesson.json"
        md_path = tmp_path / "lesson.md"

        result = runner.invoke(
            app,
            ["generate", "Photosynthesis", "--output-json", str(json_path), "--output-md", str(md_path)],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(json_path.read_text(encoding="utf-8"))
        assert data["topic"] == "Photosynthesis"
        assert len(data["comic_panels"]) == 4
        assert md_path.read_text(encoding="utf-8").startswith("# Photosynthesis")

    def test_generate_with_document(self, use_settings, settings, fake_pipeline, fake_client, tmp_path):
        use_settings(settings)
        notes = tmp_path / "notes.txt"
        notes.write_text("Chlorophyll absorbs red and blue light.", encoding="utf-8")

        result = runner.invoke(
            app,
            ["generate", "Photosynthesis", "--document", str(notes), "--grounding", "supplementary"],
        )

        assert result.exit_code == 0, result.output
        assert "notes.txt" in result.output
        assert "blockquote" in fake_client.text_calls[0]["prompt"]

    def test_blank_topic(self, use_settings, settings, fake_pipeline):
        use_settings(settings)

        result = runner.invoke(app, ["generate", "   "])

        assert result.exit_code == 1
        assert "Please enter a concept" in result.output
        assert fake_pipeline.calls == 0

    def test_missing_document(self, use_settings, settings, fake_pipeline, tmp_path):
        use_settings(settings)

        result = runner.invoke(app, ["generate", "Photosynthesis", "--document", str(tmp_path / "gone.txt")])

        assert result.exit_code == 1
        assert "not found" in result.output
        assert fake_pipeline.calls == 0

    def test_missing_key(self, use_settings, unconfigured_settings, fake_pipeline):
        use_settings(unconfigured_settings)

        result = runner.invoke(app, ["generate", "Photosynthesis"])

        assert result.exit_code == 1
        assert "Failed to generate the lesson" in result.output
        assert fake_pipeline.calls == 0

    def test_malformed_response(self, use_settings, settings, fake_pipeline, fake_client):
        use_settings(settings)
        fake_client.text = "I'd rather not."

        result = runner.invoke(app, ["generate", "Photosynthesis"])

        assert result.exit_code == 1
        assert "Failed to generate the lesson" in result.output

    def test_bracketed_text_printed_literally(
        self, use_settings, settings, fake_pipeline, fake_client, lesson_payload, tmp_path
    ):
        use_settings(settings)
        lesson_payload["flashcards"][0]["term"] = "Closing [/i] tag"
        fake_client.text = json.dumps(lesson_payload)
        notes = tmp_path / "notes [/b].txt"
        notes.write_text("Rich treats [b]...[/b] as markup.", encoding="utf-8")
        json_path = tmp_path / "lesson.json"

        result = runner.invoke(
            app,
            [
                "generate",
                "Closing tags [/b] in Rich",
                "--document",
                str(notes),
                "--output-json",
                str(json_path),
            ],
        )

        assert result.exit_code == 0, result.output
        assert "Closing tags [/b] in Rich" in result.output
        assert "notes [/b].txt" in result.output
        data = json.loads(json_path.read_text(encoding="utf-8"))
        assert data["topic"] == "Closing tags [/b] in Rich"
        assert data["flashcards"][0]["term"] == "Closing [/i] tag"
