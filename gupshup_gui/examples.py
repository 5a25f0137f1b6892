"""Sample text generation for template placeholders."""

from __future__ import annotations

import re

_PLACEHOLDER = re.compile(r"\{\{[ \t\n\f\r]*([0-9]+)[ \t\n\f\r]*\}\}")


def fill_example_variables(text: str) -> str:
    """Replace ``{{1}}``, ``{{2}}``, ... with ``Variavel1``, ``Variavel2``, ..."""
    return _PLACEHOLDER.sub(lambda match: "Variavel" + match.group(1), text)