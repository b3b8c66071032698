from __future__ import annotations

import pytest

from jxr2prism.model.options import AnchorMode, ConverterOptions, SiteOptions


class TestConverterOptions:
    def test_defaults(self) -> None:
        options = ConverterOptions()
        assert options.language == "java"
        assert options.block_selector == "pre"
        assert options.anchor_mode is AnchorMode.SEQUENTIAL
        assert options.processed_attribute == "data-prism-processed"
        assert "jxr_linenumber" in options.anchor_selector

    def test_from_cli_maps_values(self) -> None:
        options = ConverterOptions.from_cli(language=" Kotlin ", anchor_mode="preserve")
        assert options.language == "kotlin"
        assert options.anchor_mode is AnchorMode.PRESERVE

    def test_from_cli_rejects_unknown_anchor_mode(self) -> None:
        with pytest.raises(ValueError, match="Invalid anchor mode 'random'"):
            ConverterOptions.from_cli(anchor_mode="random")

    def test_from_cli_rejects_empty_language(self) -> None:
        with pytest.raises(ValueError, match="Language"):
            ConverterOptions.from_cli(language="  ")

    def test_to_dict_and_repr(self) -> None:
        options = ConverterOptions(anchor_mode=AnchorMode.PRESERVE)
        data = options.to_dict()
        assert data["anchor_mode"] == "preserve"
        assert data["language"] == "java"
        assert "anchor_mode=preserve" in repr(options)


def test_site_options_defaults() -> None:
    options = SiteOptions()
    assert options.styles_dir == "terminal-styles"
    assert options.convert_jxr and options.inject
    assert not options.skip
