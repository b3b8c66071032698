"""Converter and site processing options.

Defaults reproduce the stock JXR-to-Prism behavior: Java grammar, the first
``<pre>`` in the page, ``jxr_linenumber`` anchors and sequential ``L<n>`` ids.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class AnchorMode(Enum):
    """How line anchors of the converted block are named."""

    SEQUENTIAL = "sequential"  # Fresh L1..LN, original anchors discarded
    PRESERVE = "preserve"  # Reuse original anchor names when counts match


@dataclass
class ConverterOptions:
    """Configuration for SourceRenderConverter."""

    # Grammar name handed to the highlighting engine and used in class names
    language: str = "java"

    # CSS selector locating the rendered source block (first match wins)
    block_selector: str = "pre"

    # CSS selector for the per-line anchors inside the block
    anchor_selector: str = "a.jxr_linenumber, .jxr_linenumber"

    # Attribute set on the converted container to make conversion idempotent
    processed_attribute: str = "data-prism-processed"

    anchor_mode: AnchorMode = AnchorMode.SEQUENTIAL

    container_class: str = "jxr-prism-container"
    line_numbers_class: str = "jxr-line-numbers"
    code_container_class: str = "jxr-code-container"
    line_anchor_class: str = "jxr_linenumber"

    @classmethod
    def from_cli(
        cls,
        *,
        language: str = "java",
        anchor_mode: str = "sequential",
        block_selector: str = "pre",
    ) -> ConverterOptions:
        """Build ConverterOptions from CLI argument values.

        Raises:
            ValueError: If any argument has an invalid value
        """
        try:
            mode = AnchorMode(anchor_mode)
        except ValueError as exc:
            valid_values = [m.value for m in AnchorMode]
            raise ValueError(
                f"Invalid anchor mode '{anchor_mode}'. Valid values: {valid_values}"
            ) from exc

        language = (language or "").strip().lower()
        if not language:
            raise ValueError("Language must not be empty")
        if not (block_selector or "").strip():
            raise ValueError("Block selector must not be empty")

        return cls(language=language, anchor_mode=mode, block_selector=block_selector.strip())

    def to_dict(self) -> dict[str, Any]:
        return {
            "language": self.language,
            "block_selector": self.block_selector,
            "anchor_selector": self.anchor_selector,
            "processed_attribute": self.processed_attribute,
            "anchor_mode": self.anchor_mode.value,
        }

    def __repr__(self) -> str:
        return (
            f"ConverterOptions("
            f"language={self.language!r}, "
            f"block_selector={self.block_selector!r}, "
            f"anchor_mode={self.anchor_mode.value}"
            f")"
        )


@dataclass
class SiteOptions:
    styles_dir: str = "terminal-styles"
    skip: bool = False
    convert_jxr: bool = True
    inject: bool = True


__all__ = [
    "AnchorMode",
    "ConverterOptions",
    "SiteOptions",
]
