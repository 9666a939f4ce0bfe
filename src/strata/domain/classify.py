"""CSS class derivation for content type names."""

from __future__ import annotations

import unicodedata


def html_classify(text: str) -> str:
    """Slugify a content type name into a CSS class fragment.

    Letters and digits of any script are kept and lower-cased. A dash is
    inserted where a lower-case letter or digit is followed by an
    upper-case letter, and every run of other characters becomes one
    dash. Acronyms are not split, so ``HTMLWidget`` and ``HtmlWidget``
    stay distinct.

    Two names share a slug only when they are equal after those
    boundaries and separator runs are replaced by a dash and the result
    is lower-cased: ``Html_Widget``, ``Html Widget`` and ``HtmlWidget``
    collide, as do ``htmlWidget`` and ``HtmlWidget``.

    Examples:
        >>> html_classify("BlogPost")
        'blog-post'
        >>> html_classify("HTMLWidget")
        'htmlwidget'
        >>> html_classify("Raw Html_Widget")
        'raw-html-widget'
        >>> html_classify("Новости")
        'новости'
    """
    chars: list[str] = []
    previous = ""
    for ch in unicodedata.normalize("NFKC", text):
        if not ch.isalnum():
            previous = ""
            if chars and chars[-1] != "-":
                chars.append("-")
            continue
        if ch.isupper() and (previous.islower() or previous.isdigit()):
            chars.append("-")
        chars.append(ch.lower())
        previous = ch
    return "".join(chars).strip("-")
