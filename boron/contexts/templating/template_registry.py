import os
from pathlib import Path
from typing import Dict, List

from dotenv import load_dotenv
from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template, TemplateNotFound

from boron.utils.latex_escaping import (
    escape_url,
    extract_username,
    normalize_url,
    render_inline_markup,
    sanitize,
)

load_dotenv()
_templates_path = os.getenv("RESUME_TEMPLATES_PATH")
TEMPLATES_PATH = (
    Path(_templates_path) if _templates_path else Path(__file__).parent / "templates"
)


def _href(url: str) -> str:
    return escape_url(normalize_url(url))


class TemplateRegistry:
    """
    Registry for loading and caching Jinja2 templates for LaTeX generation.

    Templates are stored in templates/{template_name}/{part}.tex.jinja, where
    part is "document" or a section name, and use custom delimiters to avoid
    conflicts with LaTeX syntax:
    - Variable: <<< var >>>
    - Block: <%% block %%>
    - Comment: <# comment #>

    Escaping is done in templates through filters:
    - latex: sanitize plain text
    - markup: sanitize, then render **bold** as \\textbf{}
    - href: normalize and escape a URL for \\href targets
    - url: escape a URL without normalizing it (mailto targets)
    - username: last path segment of a profile URL
    """

    def __init__(self, templates_base_path: Path = None):
        """
        Initialize the template registry.

        Args:
            templates_base_path: Base path for template directories. Defaults to
                           RESUME_TEMPLATES_PATH from environment, then the
                           templates/ directory shipped with this package
        """
        if templates_base_path is None:
            templates_base_path = TEMPLATES_PATH

        self.templates_base_path = Path(templates_base_path)
        self._cache: Dict[str, Template] = {}

        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_base_path)),
            # Catches silent failures
            undefined=StrictUndefined,
            # Custom delimiters to avoid LaTeX brace conflicts
            variable_start_string="<<<",
            variable_end_string=">>>",
            block_start_string="<%%",
            block_end_string="%%>",
            comment_start_string="<#",
            comment_end_string="#>",
            # Block tags sit on their own lines in the templates
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            autoescape=False,
        )
        self.env.filters["latex"] = sanitize
        self.env.filters["markup"] = render_inline_markup
        self.env.filters["href"] = _href
        self.env.filters["url"] = escape_url
        self.env.filters["username"] = extract_username

    def get_template(self, template_name: str, part: str) -> Template:
        """
        Get a template part, loading and caching it if necessary.

        Args:
            template_name: Template family (e.g., 'classic', 'modern')
            part: 'document' or a section name (e.g., 'experience')

        Returns:
            Jinja2 Template object

        Raises:
            TemplateNotFound: If template file doesn't exist
            TemplateSyntaxError: If template has Jinja2 syntax errors
        """
        cache_key = f"{template_name}/{part}"
        if cache_key in self._cache:
            return self._cache[cache_key]

        template_path = f"{template_name}/{part}.tex.jinja"
        try:
            template = self.env.get_template(template_path)
        except TemplateNotFound:
            raise TemplateNotFound(
                f"Template not found: {template_path} (base path: {self.templates_base_path})"
            )

        self._cache[cache_key] = template
        return template

    def has_template(self, template_name: str) -> bool:
        """Check whether a template family exists (has a document part)."""
        return (self.templates_base_path / template_name / "document.tex.jinja").exists()

    def list_templates(self) -> List[str]:
        """List available template families."""
        if not self.templates_base_path.exists():
            return []
        return sorted(
            path.name
            for path in self.templates_base_path.iterdir()
            if path.is_dir() and (path / "document.tex.jinja").exists()
        )

    def clear_cache(self):
        """Clear the template cache (useful for development/testing)."""
        self._cache.clear()
