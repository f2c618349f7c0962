"""Utility for reducing a C++ type spelling to its underlying type name."""

import re

QUALIFIER_RE = re.compile(r"\b(const|volatile|struct|class|enum)\b")


def bare_type(spelling: str) -> str:
    """Strip cv-qualifiers, elaborations, pointers and references.

    "const QMouseEvent *" -> "QMouseEvent", "unsigned  int&" -> "unsigned int".
    """
    text = QUALIFIER_RE.sub(" ", spelling)
    text = text.replace("*", " ").replace("&", " ")
    return " ".join(text.split())
