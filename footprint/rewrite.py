"""
Declarative regex rewrite engine.

A RewriteRule is a data record: a compiled pattern plus a replacement
template. Templates are str.format strings that may reference the
pattern's named groups (e.g. {profile}), {phrase} for the matched text,
and any keyword supplied by the caller (e.g. {networks}). A pattern with
a group named "phrase" supplies {phrase} from that group instead.

Replacements follow the case of the text they replace: a sentence-initial
"No ..." becomes "An ...", a mid-sentence "no ..." becomes "an ...".

Every rule table fed to this engine must be idempotent: a template's
output must never match any pattern in the same table.
"""

import re
from dataclasses import dataclass
from typing import Optional, Pattern, Sequence


@dataclass(frozen=True)
class RewriteRule:
    name: str
    pattern: Pattern
    template: str

    def render(self, match: "re.Match", **fmt) -> str:
        phrase = match.group(0)
        values = {k: v for k, v in match.groupdict().items() if v is not None}
        values.update(fmt)
        values["phrase"] = lower_first(values.get("phrase", phrase))
        return match_case(phrase, self.template.format(**values))

    def apply(self, text: str, **fmt) -> str:
        return self.pattern.sub(lambda m: self.render(m, **fmt), text)

    def matches(self, text: str) -> bool:
        return bool(self.pattern.search(text))


def rule(name: str, pattern: str, template: str) -> RewriteRule:
    """Compile a case-insensitive RewriteRule."""
    return RewriteRule(name=name, pattern=re.compile(pattern, re.IGNORECASE), template=template)


def lower_first(text: str) -> str:
    if not text:
        return text
    return text[0].lower() + text[1:]


def match_case(source: str, replacement: str) -> str:
    """Give replacement the leading-letter case of source."""
    if not source or not replacement:
        return replacement
    if source[0].isupper():
        return replacement[0].upper() + replacement[1:]
    if source[0].islower():
        return replacement[0].lower() + replacement[1:]
    return replacement


def apply_rules(text: str, rules: Sequence[RewriteRule], **fmt) -> str:
    """Apply every rule in order; non-matching rules are no-ops."""
    if not isinstance(text, str) or not text:
        return text
    for r in rules:
        text = r.apply(text, **fmt)
    return text


def first_match(text: str, rules: Sequence[RewriteRule]) -> Optional[RewriteRule]:
    """First rule whose pattern occurs in text, or None."""
    if not isinstance(text, str) or not text:
        return None
    for r in rules:
        if r.matches(text):
            return r
    return None
