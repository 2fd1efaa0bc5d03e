"""Markdown -> HTML with wiki-style cross references.

A reference-style link whose label has no definition anywhere in the
document is rendered as a link to an internal page instead of as literal
text:

    See [Other Page].   ->  <p>See <a href="/article/Other Page">Other Page</a>.</p>

Inline links and references with a definition are left alone.
"""

from collections.abc import Callable

from markdown_it import MarkdownIt
from markdown_it.common.utils import normalizeReference
from markdown_it.helpers import parseLinkLabel
from markdown_it.rules_inline import StateInline

ARTICLE_PREFIX = "/article/"
RESOLVER_ENV_KEY = "tome_resolver"

Resolver = Callable[[str], str]


def article_link(label: str) -> str:
    """Internal target for an unresolved label, used verbatim."""
    return ARTICLE_PREFIX + label


def _unresolved_reference(state: StateInline, silent: bool) -> bool:
    """Inline rule tried after the built-in link rule has given up on a '['."""
    resolver = state.env.get(RESOLVER_ENV_KEY)
    if resolver is None or state.linkLevel > 0:
        return False
    src = state.src
    start = state.pos
    if src[start] != "[":
        return False
    if start > 0 and src[start - 1] == "!" and not src[: start - 1].endswith("\\"):
        return False  # unresolved image, keep literal

    maximum = state.posMax
    label_start = start + 1
    label_end = parseLinkLabel(state, start, True)
    if label_end < 0:
        return False

    pos = label_end + 1
    label = None
    if pos < maximum and src[pos] == "[":
        ref_end = parseLinkLabel(state, pos)
        if ref_end >= 0:
            label = src[pos + 1 : ref_end]
            pos = ref_end + 1
    # collapsed ([text][]) and shortcut ([text]) forms use the text as label
    if not label:
        label = src[label_start:label_end]
    if not label.strip():
        return False
    if normalizeReference(label) in state.env.get("references", {}):
        return False

    href = resolver(label)
    if not state.md.validateLink(href):
        return False

    if not silent:
        state.pos = label_start
        state.posMax = label_end

        token = state.push("link_open", "a", 1)
        token.attrSet("href", href)
        token.meta["unresolved_label"] = label

        state.linkLevel += 1
        state.md.inline.tokenize(state)
        state.linkLevel -= 1

        state.push("link_close", "a", -1)

    state.pos = pos
    state.posMax = maximum
    return True


def _build() -> MarkdownIt:
    md = MarkdownIt("commonmark", {"html": False}).enable(["table", "strikethrough"])
    md.inline.ruler.after("link", "unresolved_reference", _unresolved_reference)
    return md


_md = _build()


def render(text: str, resolver: Resolver = article_link) -> str:
    """Render Markdown to HTML safe for direct embedding in a page."""
    return _md.render(text, {RESOLVER_ENV_KEY: resolver})
