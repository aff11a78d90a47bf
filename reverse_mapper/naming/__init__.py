# ==============================================
# NAMING: table → class and column → field names
# ==============================================
#
# Modules:
# --------
# - inflector.py      → classify / camelize / pluralize (inflect)
# - name_resolver.py  → NameResolver with overrides and memoisation
#
# ==============================================

from .inflector import camelize, capitalize, classify, pluralize, strip_id_suffix
from .name_resolver import NameResolver, join_namespace

__all__ = [
    "camelize",
    "capitalize",
    "classify",
    "pluralize",
    "strip_id_suffix",
    "NameResolver",
    "join_namespace",
]
