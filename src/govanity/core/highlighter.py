"""Syntax highlighting for README code blocks.

Wraps Pygments lexers and maps token types onto a small set of ``hl-*``
CSS classes shared with the bundled stylesheet.
"""

import html
import logging
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from pygments import token as T
from pygments.lexers import get_all_lexers, get_lexer_by_name
from pygments.util import ClassNotFound

from govanity.assets import read_static

logger = logging.getLogger(__name__)

PLAINTEXT = "plaintext"

# Looked up from the most specific token type towards Token.
TOKEN_CLASSES: Mapping[T._TokenType, str] = MappingProxyType(
    {
        T.Comment: "hl-comment",
        T.Keyword.Constant: "hl-literal",
        T.Keyword.Type: "hl-type",
        T.Keyword: "hl-keyword",
        T.Name.Builtin: "hl-built-in",
        T.Name.Function: "hl-title",
        T.Name.Class: "hl-title",
        T.Name.Tag: "hl-tag",
        T.Name.Attribute: "hl-attr",
        T.Name.Decorator: "hl-meta",
        T.Name.Variable: "hl-variable",
        T.Name: "",
        T.String: "hl-string",
        T.Number: "hl-number",
        T.Literal: "hl-literal",
        T.Operator.Word: "hl-keyword",
        T.Operator: "hl-operator",
        T.Punctuation: "hl-punctuation",
        T.Generic.Deleted: "hl-deletion",
        T.Generic.Inserted: "hl-addition",
        T.Generic.Heading: "hl-section",
        T.Generic.Subheading: "hl-section",
        T.Generic.Prompt: "hl-meta",
        T.Error: "",
    }
)


def token_class(ttype: T._TokenType) -> str:
    """Return the ``hl-*`` class for a Pygments token type ("" for none)."""
    current: T._TokenType | None = ttype
    while current is not None:
        if current in TOKEN_CLASSES:
            return TOKEN_CLASSES[current]
        current = current.parent
    return ""


class LanguageRegistry:
    """Immutable table of language aliases to Pygments lexer names.

    Built once at startup and shared read-only by every render.
    """

    def __init__(self, aliases: Mapping[str, str]) -> None:
        self._aliases = MappingProxyType(dict(aliases))

    @classmethod
    def builtin(cls, only: Iterable[str] | None = None) -> "LanguageRegistry":
        """Build the registry from the lexers bundled with Pygments.

        Args:
            only: Optional subset of language names to enable. Every alias
                  of an enabled lexer is enabled with it.

        Returns:
            LanguageRegistry instance

        Raises:
            ValueError: If ``only`` names a language Pygments does not know
        """
        aliases: dict[str, str] = {}
        for _name, lexer_aliases, _filenames, _mimetypes in get_all_lexers():
            if not lexer_aliases:
                continue
            canonical = lexer_aliases[0]
            for alias in lexer_aliases:
                aliases.setdefault(alias.lower(), canonical)

        if only is not None:
            wanted = {name.lower() for name in only}
            unknown = wanted - aliases.keys()
            if unknown:
                raise ValueError(f"Unknown languages: {', '.join(sorted(unknown))}")
            enabled = {aliases[name] for name in wanted}
            aliases = {alias: lexer for alias, lexer in aliases.items() if lexer in enabled}

        return cls(aliases)

    def lexer_name(self, lang: str | None) -> str | None:
        """Return the lexer name for a language alias, or None if unknown."""
        if not lang:
            return None
        return self._aliases.get(lang.lower())

    def __contains__(self, lang: object) -> bool:
        return isinstance(lang, str) and self.lexer_name(lang) is not None

    def __len__(self) -> int:
        return len(self._aliases)


class SyntaxHighlighter:
    """Turn code text into HTML with ``hl-*`` classed spans.

    Unknown or missing languages are treated as plaintext: the code is
    escaped and returned without any spans.
    """

    def __init__(self, languages: LanguageRegistry) -> None:
        self._languages = languages

    @property
    def languages(self) -> LanguageRegistry:
        return self._languages

    def resolve_language(self, lang: str | None) -> str:
        """Return ``lang`` lowercased if it can be highlighted, else plaintext."""
        if lang and lang.lower() in self._languages:
            return lang.lower()
        return PLAINTEXT

    def highlight(self, code: str, lang: str | None = None) -> str:
        """Highlight code.

        Args:
            code: Source text
            lang: Language alias (e.g. "go", "python"); None for plaintext

        Returns:
            HTML fragment suitable for placing inside ``<code>``
        """
        lexer_name = self._languages.lexer_name(lang) if lang != PLAINTEXT else None
        if lexer_name is None:
            return html.escape(code)

        try:
            lexer = get_lexer_by_name(lexer_name, stripnl=False, ensurenl=False)
        except ClassNotFound:
            logger.debug(f"No lexer for {lang}, falling back to plaintext")
            return html.escape(code)

        return "".join(_spans(_merge(lexer.get_tokens(code))))

    def stylesheet(self) -> str:
        """CSS rules for the ``hl-*`` classes emitted by highlight()."""
        return read_static("highlight.css")


def _merge(tokens: Iterable[tuple[T._TokenType, str]]) -> Iterator[tuple[str, str]]:
    """Collapse adjacent tokens that map to the same class."""
    current_class: str | None = None
    parts: list[str] = []
    for ttype, value in tokens:
        css_class = token_class(ttype)
        if css_class != current_class and parts:
            yield current_class or "", "".join(parts)
            parts = []
        current_class = css_class
        parts.append(value)
    if parts:
        yield current_class or "", "".join(parts)


def _spans(chunks: Iterable[tuple[str, str]]) -> Iterator[str]:
    for css_class, value in chunks:
        escaped = html.escape(value)
        if css_class:
            yield f'<span class="{css_class}">{escaped}</span>'
        else:
            yield escaped
