"""Converter registry mapping a sniffed media kind to its converter."""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, Iterable, Sequence, Type

from ..models import MediaKind
from .base import StickerConverter


DEFAULT_CONVERTER_MODULES: Sequence[str] = (
    "wa_sticker.converters.builtin.static_image",
    "wa_sticker.converters.builtin.svg",
    "wa_sticker.converters.builtin.animated",
)


class ConverterRegistry:
    def __init__(self) -> None:
        self._registry: Dict[MediaKind, Type[StickerConverter]] = {}

    def register(self, converter_cls: Type[StickerConverter]) -> None:
        key = MediaKind(converter_cls.media_kind)
        if key in self._registry:
            raise ValueError(f"Converter already registered for {key.value}")
        self._registry[key] = converter_cls

    def get(self, kind: MediaKind | str, **kwargs: Any) -> StickerConverter:
        key = MediaKind(kind)
        if key not in self._registry:
            raise KeyError(f"No converter registered for {key.value}")
        return self._registry[key](**kwargs)

    def kinds(self) -> list[MediaKind]:
        return list(self._registry)

    def list(self, **kwargs: Any) -> Iterable[StickerConverter]:
        for converter_cls in self._registry.values():
            yield converter_cls(**kwargs)


REGISTRY = ConverterRegistry()


def load_converters(module_names: Iterable[str] | None = None) -> None:
    """Import converter modules and trigger their registration side-effects."""

    modules = list(module_names or DEFAULT_CONVERTER_MODULES)
    for module in modules:
        import_module(module)


__all__ = ["REGISTRY", "DEFAULT_CONVERTER_MODULES", "ConverterRegistry", "load_converters"]
