"""Unit tests for TemplateRegistry class."""

import pytest
from jinja2 import StrictUndefined, TemplateNotFound, UndefinedError

from boron.contexts.templating.template_registry import TemplateRegistry


@pytest.mark.unit
def test_template_registry_init():
    """Test TemplateRegistry initialization."""
    registry = TemplateRegistry()
    assert registry.templates_base_path.exists()
    assert registry._cache == {}
    assert registry.env.undefined is StrictUndefined


@pytest.mark.unit
def test_list_templates():
    """Both shipped template families are discovered."""
    registry = TemplateRegistry()
    assert registry.list_templates() == ["classic", "modern"]
    assert registry.has_template("classic")
    assert not registry.has_template("nonexistent")


@pytest.mark.unit
def test_template_caching():
    """Test that templates are cached after first load."""
    registry = TemplateRegistry()

    template1 = registry.get_template("classic", "experience")
    assert "classic/experience" in registry._cache

    template2 = registry.get_template("classic", "experience")
    assert template1 is template2


@pytest.mark.unit
def test_get_template_not_found():
    """Test error handling for missing template."""
    registry = TemplateRegistry()

    with pytest.raises(TemplateNotFound):
        registry.get_template("classic", "nonexistent_section")


@pytest.mark.unit
def test_clear_cache():
    """Test cache clearing."""
    registry = TemplateRegistry()

    registry.get_template("classic", "skills")
    assert len(registry._cache) == 1

    registry.clear_cache()
    assert len(registry._cache) == 0


@pytest.mark.unit
def test_custom_delimiters_and_filters(tmp_path):
    """Custom delimiters leave LaTeX braces alone; filters escape values."""
    family = tmp_path / "plain"
    family.mkdir()
    (family / "document.tex.jinja").write_text(
        "<# comment #>\\textbf{<<< name|latex >>>} \\href{<<< url|href >>>}{<<< url|username >>>}\n"
    )

    registry = TemplateRegistry(templates_base_path=tmp_path)
    rendered = registry.get_template("plain", "document").render(
        name="R&D", url="github.com/ada_l"
    )

    assert rendered == "\\textbf{R\\&D} \\href{https://github.com/ada\\_l}{ada_l}\n"


@pytest.mark.unit
def test_missing_variable_raises(tmp_path):
    """StrictUndefined turns a missing variable into an error, not empty output."""
    family = tmp_path / "plain"
    family.mkdir()
    (family / "document.tex.jinja").write_text("<<< missing >>>")

    registry = TemplateRegistry(templates_base_path=tmp_path)
    with pytest.raises(UndefinedError):
        registry.get_template("plain", "document").render()
