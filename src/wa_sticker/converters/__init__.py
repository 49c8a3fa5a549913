"""Converter package exports and convenience loaders."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from .registry import DEFAULT_CONVERTER_MODULES, REGISTRY, load_converters

if TYPE_CHECKING:  # pragma: no cover - import guard for type checkers
    from wa_sticker.config import Settings


def _modules_from_settings(settings: "Settings | None") -> List[str]:
    if not settings:
        return []
    return [module for module in settings.converter_modules if module]


def load_converters_from_settings(settings: "Settings | None" = None) -> None:
    """Load converter modules named in settings or fall back to the builtins."""

    modules = _modules_from_settings(settings)
    if not modules:
        modules = list(DEFAULT_CONVERTER_MODULES)
    load_converters(modules)


__all__ = ["REGISTRY", "load_converters_from_settings", "load_converters", "DEFAULT_CONVERTER_MODULES"]
