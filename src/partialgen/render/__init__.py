"""
Rendering of generated projections as source code.
"""

from partialgen.render.python import (
    PythonRenderer,
    content_digest,
    read_digest,
    render_results,
)

__all__ = [
    "PythonRenderer",
    "content_digest",
    "read_digest",
    "render_results",
]
