# File: sketchgen/utils.py
"""
Sketchgen - Naming Conventions & Helpers
==========================================
Pure string transformations that derive every Laravel name the generators
need (table names, pivot names, foreign keys, accessor methods) from a
model name, plus the small file-system and timing helpers shared by the
pipeline.

All naming functions are decorated with ``@lru_cache(maxsize=None)``: the
same model name is converted many times per run (once per generator, once
per relationship) and the mappings never change.
"""

from __future__ import annotations

import functools
import hashlib
import logging
import re
import time
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("sketchgen.utils")

# ---------------------------------------------------------------------------
# Pre-compiled regex patterns
# ---------------------------------------------------------------------------

_CAMEL_TO_SNAKE_RE1: re.Pattern[str] = re.compile(r"([A-Z]+)([A-Z][a-z])")
_CAMEL_TO_SNAKE_RE2: re.Pattern[str] = re.compile(r"([a-z0-9])([A-Z])")
_NON_ALPHANUM_RE: re.Pattern[str] = re.compile(r"[^a-zA-Z0-9]")
_MULTI_UNDERSCORE_RE: re.Pattern[str] = re.compile(r"_{2,}")
_LEADING_TRAILING_UNDERSCORE_RE: re.Pattern[str] = re.compile(r"^_+|_+$")
_SPLIT_WORDS_RE: re.Pattern[str] = re.compile(
    r"[A-Z]?[a-z]+|[A-Z]+(?=[A-Z][a-z]|\d|\b)|[A-Z]|\d+"
)
# Splits "BlogPost" into ("Blog", "Post") and "user_profile" into ("user_", "profile")
_LAST_WORD_RE: re.Pattern[str] = re.compile(r"^(.*?)([A-Z]?[a-z]+|[A-Z]+)$")
_NAMESPACE_SEPARATOR_RE: re.Pattern[str] = re.compile(r"[\\/]")

# ---------------------------------------------------------------------------
# Inflection tables
# ---------------------------------------------------------------------------

_IRREGULAR_PLURALS: Dict[str, str] = {
    "person": "people",
    "child": "children",
    "man": "men",
    "woman": "women",
    "mouse": "mice",
    "goose": "geese",
    "tooth": "teeth",
    "foot": "feet",
    "ox": "oxen",
    "datum": "data",
    "index": "indices",
    "matrix": "matrices",
    "vertex": "vertices",
    "axis": "axes",
    "crisis": "crises",
    "analysis": "analyses",
    "status": "statuses",
    "criterion": "criteria",
    "medium": "media",
    "leaf": "leaves",
    "half": "halves",
    "shelf": "shelves",
    "wolf": "wolves",
    "thief": "thieves",
    "knife": "knives",
    "wife": "wives",
    "life": "lives",
    "hero": "heroes",
    "potato": "potatoes",
    "tomato": "tomatoes",
    "echo": "echoes",
    "quiz": "quizzes",
}

_IRREGULAR_SINGULARS: Dict[str, str] = {v: k for k, v in _IRREGULAR_PLURALS.items()}

_UNCOUNTABLE: FrozenSet[str] = frozenset({
    "audio", "equipment", "evidence", "feedback", "fish", "information",
    "knowledge", "metadata", "money", "news", "police", "rice", "series",
    "sheep", "species", "software", "traffic",
})

# Laravel column types that already create an auto-incrementing primary key
AUTO_INCREMENT_TYPES: FrozenSet[str] = frozenset({
    "id", "increments", "bigIncrements", "mediumIncrements",
    "smallIncrements", "tinyIncrements",
})


# ---------------------------------------------------------------------------
# Cached case conversions
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=None)
def to_snake_case(name: str) -> str:
    """
    Convert any string to snake_case.

    Examples:
        >>> to_snake_case("BlogPost")
        'blog_post'
        >>> to_snake_case("HTTPResponse")
        'http_response'
        >>> to_snake_case("already_snake")
        'already_snake'
    """
    if not name:
        return ""
    s: str = _CAMEL_TO_SNAKE_RE1.sub(r"\1_\2", name)
    s = _CAMEL_TO_SNAKE_RE2.sub(r"\1_\2", s)
    s = _NON_ALPHANUM_RE.sub("_", s)
    s = _MULTI_UNDERSCORE_RE.sub("_", s)
    s = _LEADING_TRAILING_UNDERSCORE_RE.sub("", s)
    return s.lower()


@functools.lru_cache(maxsize=None)
def to_studly_case(name: str) -> str:
    """
    Convert any string to StudlyCase (Laravel's name for PascalCase).

    Examples:
        >>> to_studly_case("blog_post")
        'BlogPost'
        >>> to_studly_case("BlogPost")
        'BlogPost'
    """
    if not name:
        return ""
    return "".join(word.capitalize() for word in _extract_words(name))


@functools.lru_cache(maxsize=None)
def to_camel_case(name: str) -> str:
    """
    Convert any string to camelCase.

    Examples:
        >>> to_camel_case("BlogPost")
        'blogPost'
        >>> to_camel_case("user")
        'user'
    """
    words: Tuple[str, ...] = _extract_words(name) if name else ()
    if not words:
        return ""
    return words[0] + "".join(w.capitalize() for w in words[1:])


@functools.lru_cache(maxsize=None)
def _extract_words(name: str) -> Tuple[str, ...]:
    """Split any casing style into a tuple of lowercase words."""
    cleaned: str = _NON_ALPHANUM_RE.sub(" ", name)
    return tuple(w.lower() for w in _SPLIT_WORDS_RE.findall(cleaned) if w)


# ---------------------------------------------------------------------------
# Inflection
# ---------------------------------------------------------------------------


def _match_case(source: str, replacement: str) -> str:
    if source.isupper() and len(source) > 1:
        return replacement.upper()
    if source[:1].isupper():
        return replacement[:1].upper() + replacement[1:]
    return replacement


@functools.lru_cache(maxsize=None)
def _pluralize_word(word: str) -> str:
    lower: str = word.lower()

    if lower in _UNCOUNTABLE:
        return word
    if lower in _IRREGULAR_PLURALS:
        return _match_case(word, _IRREGULAR_PLURALS[lower])
    if lower in _IRREGULAR_SINGULARS:
        return word

    if lower.endswith(("s", "sh", "ch", "x", "z")):
        return word + "es"
    if lower.endswith("y") and len(word) > 1 and lower[-2] not in "aeiou":
        return word[:-1] + "ies"
    return word + "s"


@functools.lru_cache(maxsize=None)
def to_plural(name: str) -> str:
    """
    Pluralize the last word of *name*, keeping the rest untouched.

    Handles the regular English suffix rules, a table of common irregular
    nouns and uncountable words.  Compound names only inflect their final
    word, the way Laravel's ``Str::pluralStudly`` does.

    Examples:
        >>> to_plural("Post")
        'Posts'
        >>> to_plural("Category")
        'Categories'
        >>> to_plural("Person")
        'People'
        >>> to_plural("BlogPost")
        'BlogPosts'
    """
    if not name:
        return ""
    match: Optional[re.Match[str]] = _LAST_WORD_RE.match(name)
    if match is None:
        return name
    prefix, word = match.group(1), match.group(2)
    return prefix + _pluralize_word(word)


@functools.lru_cache(maxsize=None)
def to_singular(name: str) -> str:
    """Singularize the last word of *name* (reverse of ``to_plural``)."""
    if not name:
        return ""
    match: Optional[re.Match[str]] = _LAST_WORD_RE.match(name)
    if match is None:
        return name
    prefix, word = match.group(1), match.group(2)
    lower: str = word.lower()

    if lower in _UNCOUNTABLE:
        singular: str = word
    elif lower in _IRREGULAR_SINGULARS:
        singular = _match_case(word, _IRREGULAR_SINGULARS[lower])
    elif lower.endswith("ies") and len(word) > 3:
        singular = word[:-3] + "y"
    elif lower.endswith(("ches", "shes", "sses", "xes", "zes")):
        singular = word[:-2]
    elif lower.endswith("s") and not lower.endswith(("ss", "us", "is")):
        singular = word[:-1]
    else:
        singular = word
    return prefix + singular


# ---------------------------------------------------------------------------
# Laravel naming conventions
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=None)
def class_basename(name: str) -> str:
    """
    Return the last segment of a namespaced class name.

    Examples:
        >>> class_basename("App\\\\Models\\\\User")
        'User'
        >>> class_basename("Blog/Post")
        'Post'
    """
    return _NAMESPACE_SEPARATOR_RE.split(name)[-1] if name else ""


@functools.lru_cache(maxsize=None)
def table_name(model: str) -> str:
    """``snake(plural(basename(model)))``, e.g. ``BlogPost`` -> ``blog_posts``."""
    return to_snake_case(to_plural(class_basename(model)))


@functools.lru_cache(maxsize=None)
def pivot_table_name(model_a: str, model_b: str) -> str:
    """
    Derive the join-table name for a many-to-many pair.

    Both table names are sorted before joining, so the result does not
    depend on which side declares the relationship.

        >>> pivot_table_name("Tag", "Post") == pivot_table_name("Post", "Tag")
        True
    """
    first, second = sorted((table_name(model_a), table_name(model_b)))
    return f"{first}_{second}"


@functools.lru_cache(maxsize=None)
def default_foreign_key(model: str) -> str:
    """``snake(basename(model)) + "_id"``."""
    return f"{to_snake_case(class_basename(model))}_id"


@functools.lru_cache(maxsize=None)
def relation_method_name(model: str, plural: bool = False) -> str:
    """Accessor method name for a related model: ``User`` -> ``user`` / ``users``."""
    method: str = to_camel_case(class_basename(model))
    return to_plural(method) if plural else method


def is_snake_case(name: str) -> bool:
    return bool(name) and to_snake_case(name) == name


# ---------------------------------------------------------------------------
# Rendering helpers
# ---------------------------------------------------------------------------


def php_string_list(items: Sequence[str]) -> str:
    """Render ``['a', 'b']`` contents as ``'a', 'b'``."""
    return ", ".join(f"'{item}'" for item in items)


def indent_lines(lines: Sequence[str], level: int = 1, size: int = 4) -> List[str]:
    """Indent a list of lines, returning a new list. Blank lines stay blank."""
    prefix: str = " " * (level * size)
    return [prefix + line if line.strip() else line for line in lines]


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def ensure_directory(path: Path) -> None:
    """Create directory (and parents) if it doesn't exist."""
    path.mkdir(parents=True, exist_ok=True)
    logger.debug("Ensured directory exists: %s", path)


def sha256_hex(content: str) -> str:
    """Return SHA-256 hex digest of a string."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def count_lines(content: str) -> int:
    if not content:
        return 0
    return content.count("\n") + (1 if not content.endswith("\n") else 0)


# ---------------------------------------------------------------------------
# Timer context manager
# ---------------------------------------------------------------------------


class Timer:
    """
    Simple context-manager timer for profiling pipeline steps.

    Usage:
        with Timer("render model") as t:
            ...
        print(t.elapsed)
    """

    __slots__ = ("label", "start_time", "end_time", "elapsed")

    def __init__(self, label: str = "operation") -> None:
        self.label: str = label
        self.start_time: float = 0.0
        self.end_time: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[object],
    ) -> None:
        self.end_time = time.perf_counter()
        self.elapsed = self.end_time - self.start_time
        logger.debug("Timer [%s]: %.4f seconds", self.label, self.elapsed)

    def __repr__(self) -> str:
        return f"<Timer {self.label}: {self.elapsed:.4f}s>"


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "AUTO_INCREMENT_TYPES",
    "to_snake_case",
    "to_studly_case",
    "to_camel_case",
    "to_plural",
    "to_singular",
    "class_basename",
    "table_name",
    "pivot_table_name",
    "default_foreign_key",
    "relation_method_name",
    "is_snake_case",
    "php_string_list",
    "indent_lines",
    "ensure_directory",
    "sha256_hex",
    "count_lines",
    "Timer",
]

logger.debug("sketchgen.utils loaded — %d public symbols.", len(__all__))
