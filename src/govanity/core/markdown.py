"""README markdown rendering.

Drives mistune with a renderer whose blockquote and code block output is
supplied by an explicit RenderStrategy. Everything else renders through
mistune's standard HTML renderer.
"""

import html
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

import mistune
from mistune.core import BlockState

from govanity.core.highlighter import PLAINTEXT, SyntaxHighlighter

logger = logging.getLogger(__name__)

Token = dict[str, Any]

DEFAULT_PLUGINS = ("strikethrough", "table", "url", "task_lists")


@dataclass(frozen=True)
class RenderStrategy:
    """Rendering rules for the two overridden block kinds."""

    render_blockquote: Callable[[mistune.HTMLRenderer, Token, BlockState], str]
    render_code_block: Callable[[Token], str]


class StrategyRenderer(mistune.HTMLRenderer):
    """HTML renderer delegating blockquotes and code blocks to a strategy."""

    def __init__(self, strategy: RenderStrategy, *, escape: bool = True) -> None:
        super().__init__(escape=escape)
        self._strategy = strategy

    def render_token(self, token: Token, state: BlockState) -> str:
        token_type = token["type"]
        if token_type == "block_quote":
            return self._strategy.render_blockquote(self, token, state)
        if token_type == "block_code":
            return self._strategy.render_code_block(token)
        return super().render_token(token, state)


def markdown_to_html(
    text: str,
    strategy: RenderStrategy,
    *,
    plugins: Iterable[str] = DEFAULT_PLUGINS,
    escape: bool = True,
) -> str:
    """Convert markdown text to an HTML fragment.

    Args:
        text: Markdown source (may be empty)
        strategy: Blockquote and code block rendering rules
        plugins: mistune plugin names to enable
        escape: Escape raw HTML found in the markdown

    Returns:
        HTML fragment ("" for empty input)
    """
    if not text:
        return ""
    markdown = mistune.create_markdown(
        renderer=StrategyRenderer(strategy, escape=escape),
        plugins=list(plugins),
    )
    return str(markdown(text))


def code_language(token: Token) -> str | None:
    """Return the lowercased language from a code token's info string."""
    info = (token.get("attrs") or {}).get("info")
    if not info or not info.strip():
        return None
    return info.split(None, 1)[0].lower()


def italic_blockquote(renderer: mistune.HTMLRenderer, token: Token, state: BlockState) -> str:
    """Render quoted paragraphs as italics.

    Only direct paragraph children are wrapped; lists, nested quotes and
    code render as usual.
    """
    parts: list[str] = []
    for child in token.get("children", []):
        if child["type"] == "paragraph":
            inline = renderer.render_tokens(child.get("children", []), state)
            parts.append(f"<p><em>{inline}</em></p>")
        else:
            parts.append(renderer.render_token(child, state))
    return "".join(parts)


def highlighted_code_block(highlighter: SyntaxHighlighter) -> Callable[[Token], str]:
    """Build a code block renderer producing highlighter markup.

    Shape: ``<div class="highlight" data-language="go"><pre><code
    class="language-go">...</code></pre></div>``. The classes are what the
    highlight stylesheet targets.
    """

    def render_code_block(token: Token) -> str:
        lang = highlighter.resolve_language(code_language(token))
        code = highlighter.highlight(token.get("raw", ""), lang)
        return (
            f'<div class="highlight" data-language="{lang}">'
            f'<pre><code class="language-{lang}">{code}</code></pre>'
            "</div>\n"
        )

    return render_code_block


def plain_code_block(token: Token) -> str:
    """Render a code block without highlighting, wrapped per language."""
    lang = code_language(token) or PLAINTEXT
    code = html.escape(token.get("raw", ""))
    return f'<div class="language-{html.escape(lang)}"><pre><code>{code}</code></pre></div>\n'


def readme_strategy(highlighter: SyntaxHighlighter) -> RenderStrategy:
    """Strategy for README pages: italic quotes and highlighted code."""
    return RenderStrategy(
        render_blockquote=italic_blockquote,
        render_code_block=highlighted_code_block(highlighter),
    )


def plain_strategy() -> RenderStrategy:
    """Strategy with italic quotes and unhighlighted code blocks."""
    return RenderStrategy(
        render_blockquote=italic_blockquote,
        render_code_block=plain_code_block,
    )


class MarkdownRenderer:
    """Render README markdown to HTML with a fixed strategy."""

    def __init__(self, strategy: RenderStrategy, *, escape: bool = True) -> None:
        self._strategy = strategy
        self._escape = escape

    @property
    def strategy(self) -> RenderStrategy:
        return self._strategy

    def render(self, text: str) -> str:
        logger.debug(f"Rendering {len(text)} characters of markdown")
        body = markdown_to_html(text, self._strategy, escape=self._escape)
        logger.debug(f"Rendered to {len(body)} characters of HTML")
        return body
