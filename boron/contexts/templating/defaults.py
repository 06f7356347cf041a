"""
Templating defaults: section order and per-template section titles.
"""

DEFAULT_TEMPLATE = "classic"

# Fixed emission order; empty sections are skipped
SECTION_ORDER = ["summary", "education", "experience", "skills", "projects", "certificates"]

SECTION_TITLES = {
    "classic": {
        "summary": "Summary",
        "education": "Education",
        "experience": "Experience",
        "skills": "Skills",
        "projects": "Projects",
        "certificates": "Certifications",
    },
    "modern": {
        "summary": "Summary",
        "education": "Education",
        "experience": "Professional Experience",
        "skills": "Technical Skills",
        "projects": "Projects",
        "certificates": "Certifications",
    },
}
