"""
Boron: resume builder backend.

Contexts:
- profile: user profiles, job postings and their document stores
- templating: profile -> LaTeX resume assembly
- targeting: job-targeted resume optimization pipeline
- rendering: LaTeX session cache and PDF compilation
- generation: single-shot AI content generation and resume chat
"""

__version__ = "0.1.0"
