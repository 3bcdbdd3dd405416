from __future__ import annotations

"""
Regex Import Matching Strategy.

Recognizes import statements through text patterns instead of a grammar.
Patterns cover the statement shapes esbuild emits for ES modules:
'import <bindings> from "<path>"', 'export <bindings> from "<path>"' and
the bare side-effect form 'import "<path>"', with either quote style.
"""

import re
from typing import Callable, Final, Optional

from typebuild.core.imports.base import ImportMatcher, is_relative_specifier

# -----------------------------------------------------------------------------
# PATTERNS
# -----------------------------------------------------------------------------

# Bindings may span lines ('import {\n a,\n b\n} from "./x"') but never
# contain quotes or statement terminators
_FROM_STATEMENT: Final[re.Pattern] = re.compile(
    r"""(\b(?:import|export)\s+[^'";]*?\bfrom\s*)(['"])(\.{1,2}/[^'"\r\n]+?)(\2)"""
)

_BARE_STATEMENT: Final[re.Pattern] = re.compile(
    r"""(\bimport\s*)(['"])(\.{1,2}/[^'"\r\n]+?)(\2)"""
)

_IMPORT_LINE: Final[re.Pattern] = re.compile(
    r"""^\s*import(?:\s+[^'"]*?)?\s*from\s*(['"])([^'"]*)\1\s*;?\s*$"""
)

_BARE_IMPORT_LINE: Final[re.Pattern] = re.compile(
    r"""^\s*import\s*(['"])([^'"]*)\1\s*;?\s*$"""
)


class RegexImportMatcher(ImportMatcher):
    """
    Pattern-based ImportMatcher.
    """

    def rewrite_relative_specifiers(self, text: str, transform: Callable[[str], str]) -> str:
        def _replace(match: re.Match) -> str:
            prefix, quote, specifier, _ = match.groups()
            if not is_relative_specifier(specifier):
                return match.group(0)
            return f"{prefix}{quote}{transform(specifier)}{quote}"

        text = _FROM_STATEMENT.sub(_replace, text)
        return _BARE_STATEMENT.sub(_replace, text)

    def import_specifier(self, line: str) -> Optional[str]:
        match = _IMPORT_LINE.match(line) or _BARE_IMPORT_LINE.match(line)
        if match is None:
            return None
        return match.group(2)
