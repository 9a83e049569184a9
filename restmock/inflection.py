"""
Collection/member naming for resource types.

Types are stored under their singular name; routes and finders accept either
form ("book" or "books").
"""

import re
from typing import Dict, Iterable, Tuple

UNCOUNTABLE = frozenset({
    "equipment", "fish", "information", "metadata", "money", "news",
    "rice", "series", "sheep", "species",
})

IRREGULAR: Dict[str, str] = {
    "person": "people",
    "man": "men",
    "woman": "women",
    "child": "children",
    "mouse": "mice",
    "goose": "geese",
    "tooth": "teeth",
    "foot": "feet",
}

_IRREGULAR_SINGULAR = {plural: singular for singular, plural in IRREGULAR.items()}

# (pattern, replacement), first match wins
_PLURAL_RULES: Tuple[Tuple[str, str], ...] = (
    (r"(quiz)$", r"\1zes"),
    (r"(matr|vert|ind)(?:ix|ex)$", r"\1ices"),
    (r"(x|ch|ss|sh|zz)$", r"\1es"),
    (r"([^aeiouy]|qu)y$", r"\1ies"),
    (r"(?:([^f])fe|([lr])f)$", r"\1\2ves"),
    (r"(bu)s$", r"\1ses"),
    (r"(octop|vir)us$", r"\1i"),
    (r"(alias|atlas|bias|canvas|gas)$", r"\1es"),
    (r"(ax|test)is$", r"\1es"),
    (r"sis$", "ses"),
    (r"us$", "uses"),
    (r"s$", "s"),
    (r"$", "s"),
)

_SINGULAR_RULES: Tuple[Tuple[str, str], ...] = (
    (r"(quiz)zes$", r"\1"),
    (r"(matr)ices$", r"\1ix"),
    (r"(vert|ind)ices$", r"\1ex"),
    (r"(alias|atlas|bias|canvas|gas)es$", r"\1"),
    (r"(alias|atlas|bias|canvas|gas)$", r"\1"),
    (r"(octop|vir)i$", r"\1us"),
    (r"(cris|ax|test)es$", r"\1is"),
    (r"(analy|diagno|parenthe|progno|synop|the)ses$", r"\1sis"),
    (r"([^aeiou]us)es$", r"\1"),
    (r"(menu|guru|emu|haiku|tutu)s$", r"\1"),
    (r"(us|sis|axis)$", r"\1"),
    (r"(x|ch|ss|sh|zz)es$", r"\1"),
    (r"([^aeiouy]|qu)ies$", r"\1y"),
    (r"([lr])ves$", r"\1f"),
    (r"([^f])ves$", r"\1fe"),
    (r"(ss)$", r"\1"),
    (r"s$", ""),
)


def _split_last_word(word: str) -> Tuple[str, str]:
    """Split "blog_post" into ("blog_", "post") so only the last word inflects."""
    match = re.match(r"^(.*[_\-\s])?([^_\-\s]+)$", word)
    if not match:
        return "", word
    return match.group(1) or "", match.group(2)


def _apply(rules: Tuple[Tuple[str, str], ...], word: str) -> str:
    for pattern, replacement in rules:
        if re.search(pattern, word, re.IGNORECASE):
            return re.sub(pattern, replacement, word, count=1, flags=re.IGNORECASE)
    return word


def pluralize(word: str) -> str:
    """Return the plural form of a type name.

    Examples:
        pluralize("book") -> "books"
        pluralize("category") -> "categories"
        pluralize("person") -> "people"
        pluralize("blog_post") -> "blog_posts"
    """
    prefix, last = _split_last_word(word)
    lowered = last.lower()
    if lowered in UNCOUNTABLE or lowered in _IRREGULAR_SINGULAR:
        return word
    if lowered in IRREGULAR:
        return prefix + IRREGULAR[lowered]
    return prefix + _apply(_PLURAL_RULES, last)


def singularize(word: str) -> str:
    """Return the singular form of a type name.

    Examples:
        singularize("books") -> "book"
        singularize("categories") -> "category"
        singularize("people") -> "person"
        singularize("book") -> "book"
    """
    prefix, last = _split_last_word(word)
    lowered = last.lower()
    if lowered in UNCOUNTABLE or lowered in IRREGULAR:
        return word
    if lowered in _IRREGULAR_SINGULAR:
        return prefix + _IRREGULAR_SINGULAR[lowered]
    return prefix + _apply(_SINGULAR_RULES, last)


def resolve_type_name(name: str, known: Iterable[str]) -> str:
    """Canonical type name for ``name``, preferring types already in use.

    A known type is returned as given, a plural of a known type resolves to
    that type, and anything else is singularized only when the result
    pluralizes back to ``name``.

    Examples:
        resolve_type_name("bus", ["bus"]) -> "bus"
        resolve_type_name("buses", ["bus"]) -> "bus"
        resolve_type_name("books", []) -> "book"
    """
    known = list(known)
    if name in known:
        return name
    for type_name in known:
        if pluralize(type_name) == name:
            return type_name
    singular = singularize(name)
    if singular != name and pluralize(singular) != name:
        return name
    return singular
