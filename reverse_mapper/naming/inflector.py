# ==============================================
# Inflector
# ==============================================
#
# PURPOSE:
#   Deterministic string transforms used to turn table and column
#   names into class and field names.
#
# FUNCTIONS:
# ----------
#   - classify(word) -> str      user_group   → UserGroup
#   - camelize(word) -> str      user_group   → userGroup
#   - pluralize(word) -> str     userGroup    → userGroups   (inflect)
#   - capitalize(word) -> str    mappedBy     → MappedBy
#   - strip_id_suffix(name)      author_id    → author
#
# RULES:
# ------
#   1. "_", "-" and spaces are word separators
#   2. Only the first letter of each word is upper-cased; the rest
#      is kept as given (callers lower-case first when needed)
#   3. Pluralisation only touches the last camel-case word
#
# ==============================================

import re

import inflect

# Initialize inflect engine for pluralization
_engine = inflect.engine()

_SEPARATORS_RE = re.compile(r'[_\-\s]+')
_LAST_WORD_RE = re.compile(r'^(.*?)([A-Z]?[^A-Z]*)$', re.DOTALL)

ID_SUFFIX = "_id"


def classify(word: str) -> str:
    """
    Convert a table-like name to a class name.

    Args:
        word: e.g. "user_group", "order-items"

    Returns:
        e.g. "UserGroup", "OrderItems"
    """
    parts = [part for part in _SEPARATORS_RE.split(word) if part]
    return "".join(capitalize(part) for part in parts)


def camelize(word: str) -> str:
    """Like classify() but with a lower-case first letter."""
    classified = classify(word)
    if not classified:
        return classified
    return classified[0].lower() + classified[1:]


def capitalize(word: str) -> str:
    if not word:
        return word
    return word[0].upper() + word[1:]


def pluralize(word: str) -> str:
    """
    Pluralize the last word of a camel-cased name.

    Args:
        word: e.g. "group", "userGroup"

    Returns:
        e.g. "groups", "userGroups"
    """
    if not word:
        return word

    match = _LAST_WORD_RE.match(word)
    head, last = match.group(1), match.group(2)
    if not last:
        return word

    plural = _engine.plural_noun(last.lower())
    if last[0].isupper():
        plural = capitalize(plural)
    return head + plural


def strip_id_suffix(name: str) -> str:
    """Remove a trailing "_id" marker, if any."""
    if name.endswith(ID_SUFFIX) and len(name) > len(ID_SUFFIX):
        return name[:-len(ID_SUFFIX)]
    return name
