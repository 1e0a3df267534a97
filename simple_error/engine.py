"""Enum render engine.

Selects the active variant's Renderer from an EnumDescriptor and runs it.
Rendering never fails for a descriptor that compiled: every placeholder
was bound and capability-checked up front. Nothing here mutates shared
state, so one engine can serve any number of threads.
"""

from typing import Any

from simple_error.template.compiler import EnumDescriptor, Renderer


def render(renderer: Renderer, field_values: Any = ()) -> str:
    """Render one variant's field values with its compiled Renderer."""
    return renderer.render(field_values)


class EnumRenderEngine:
    """Renders instances of one enum type from its descriptor.

    Usage:
        engine = EnumRenderEngine(descriptor)
        engine.render("Named", {"message": "world"})   # "hello world"
    """

    __slots__ = ("descriptor",)

    def __init__(self, descriptor: EnumDescriptor) -> None:
        self.descriptor = descriptor

    def renderer_for(self, tag: str) -> Renderer:
        return self.descriptor[tag]

    def render(self, tag: str, field_values: Any = ()) -> str:
        """Render an instance given its variant tag and field values."""
        return self.descriptor[tag].render(field_values)
