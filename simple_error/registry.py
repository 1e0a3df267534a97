"""Descriptor registry.

This module provides the central registry of compiled enum descriptors.
Descriptors are registered when a SimpleError subclass compiles its
variants, and the registry provides lookup and introspection.
"""

import logging

from simple_error.template.compiler import EnumDescriptor, shape_kind_label

logger = logging.getLogger(__name__)


class DescriptorRegistry:
    """Singleton registry for all compiled enum descriptors.

    Keyed by the enum class itself, so two enums with the same name in
    different modules never collide.
    """

    _instance: "DescriptorRegistry | None" = None
    _descriptors: dict[type, EnumDescriptor]

    def __new__(cls) -> "DescriptorRegistry":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._descriptors = {}
        return cls._instance

    def register(self, enum_type: type, descriptor: EnumDescriptor) -> None:
        """Register the compiled descriptor for an enum class."""
        if enum_type in self._descriptors:
            logger.warning(
                "[REGISTRY] Enum '%s' already registered, overwriting", enum_type.__qualname__
            )
        self._descriptors[enum_type] = descriptor
        logger.debug(
            "[REGISTRY] Registered enum: %s (%d variants)",
            enum_type.__qualname__,
            len(descriptor),
        )

    def get(self, enum_type: type) -> EnumDescriptor | None:
        """Get a descriptor by enum class."""
        return self._descriptors.get(enum_type)

    def all_descriptors(self) -> list[EnumDescriptor]:
        """Get all registered descriptors."""
        return list(self._descriptors.values())

    def count(self) -> int:
        """Get total number of registered enums."""
        return len(self._descriptors)

    def clear(self) -> None:
        """Clear all registered descriptors (for testing)."""
        self._descriptors.clear()

    def describe(self) -> dict:
        """Summarize every registered enum for introspection.

        Returns a dict with one entry per enum listing its variants, their
        shape, template and referenced fields. Sorted by enum name.
        """
        enums = []
        for enum_type, descriptor in self._descriptors.items():
            variants = [
                {
                    "name": tag,
                    "shape": shape_kind_label(renderer.shape),
                    "template": renderer.template,
                    "fields": list(renderer.used_fields),
                }
                for tag, renderer in descriptor.renderers.items()
            ]
            enums.append(
                {
                    "name": descriptor.name,
                    "module": enum_type.__module__,
                    "variants": variants,
                }
            )

        enums.sort(key=lambda e: (e["name"], e["module"]))

        return {
            "total_enums": len(enums),
            "total_variants": sum(len(e["variants"]) for e in enums),
            "enums": enums,
        }


def get_registry() -> DescriptorRegistry:
    """Get the singleton descriptor registry."""
    return DescriptorRegistry()
