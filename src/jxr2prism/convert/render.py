from __future__ import annotations

import html

from jxr2prism.model.document import ConvertedBlock, LineIndex
from jxr2prism.model.options import ConverterOptions


def _attr(value: str) -> str:
    return html.escape(value, quote=True)


def render_line_numbers(index: LineIndex, options: ConverterOptions) -> str:
    cls = _attr(options.line_anchor_class)
    links = []
    for entry in index.entries:
        ident = _attr(entry.identifier)
        links.append(
            f'<a class="{cls}" href="#{ident}" id="{ident}" name="{ident}">'
            f"{html.escape(entry.label)}</a>\n"
        )
    return f'<div class="{_attr(options.line_numbers_class)}">{"".join(links)}</div>'


def render_converted_block(block: ConvertedBlock, options: ConverterOptions) -> str:
    """Render the replacement wrapper: line numbers beside the highlighted code.

    Code lines are already-escaped engine markup and are inserted as is.
    """

    lang = _attr(f"language-{block.language}")
    pre_class = f"{lang} line-numbers" if block.numbered else lang
    code = "\n".join(block.code_lines)
    numbers = render_line_numbers(block.line_index, options) if block.numbered else ""
    return (
        f'<div class="{_attr(options.container_class)}" '
        f'{_attr(options.processed_attribute)}="true">'
        f"{numbers}"
        f'<div class="{_attr(options.code_container_class)}">'
        f'<pre class="{pre_class}"><code class="{lang}">{code}</code></pre>'
        f"</div></div>"
    )


__all__ = ["render_converted_block", "render_line_numbers"]
