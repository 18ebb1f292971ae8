"""Purpose flavor table used to interpolate parameterized lessons."""

from deutschmeister.templates.purpose_flavors import (
    get_purpose_flavors,
    load_purpose_flavors,
    render_context,
)

__all__ = ["get_purpose_flavors", "load_purpose_flavors", "render_context"]
