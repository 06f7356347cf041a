"""
Rendering Context

Responsibilities:
- Caches assembled LaTeX documents per session for a limited time
- Compiles LaTeX to PDF with the external compiler and reports diagnostics

Owns: LaTeX session store, compilation
Never: Modifies resume content
"""

from boron.contexts.rendering.compiler import CompilationResult, compile_latex
from boron.contexts.rendering.session_store import LatexSessionStore, normalize_session_id

__all__ = [
    "CompilationResult",
    "compile_latex",
    "LatexSessionStore",
    "normalize_session_id",
]
