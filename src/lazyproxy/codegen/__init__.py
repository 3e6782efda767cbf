"""Code generation package for lazyproxy."""

# Re-export public functions
from .ghost import generate_lazy_ghost
from .proxy import generate_lazy_proxy
from .signature_renderer import render_signature
from .type_renderer import render_type

__all__ = [
    "generate_lazy_ghost",
    "generate_lazy_proxy",
    "render_signature",
    "render_type",
]
