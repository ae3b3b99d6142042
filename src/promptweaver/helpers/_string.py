"""String manipulation helpers."""

import re

from promptweaver.utils import is_missing, is_sequence, to_number, to_text

_REGEX_FLAGS = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL, "x": re.VERBOSE}
_GROUP_REFERENCE = re.compile(r"\$(\d+|&)")


def _pad(text: str, length: int, pad: str) -> str:
    """Return the fill needed to bring ``text`` up to ``length``."""
    missing = length - len(text)
    if missing <= 0 or not pad:
        return ""
    return (pad * (missing // len(pad) + 1))[:missing]


def replace(value: object, pattern: object, replacement: object) -> str:
    """Replace every match of the regular expression ``pattern``."""
    text = to_text(replacement)
    return re.sub(to_text(pattern), lambda _: text, to_text(value))


def replace_all(value: object, search: object, replacement: object) -> str:
    """Replace every literal occurrence of ``search``."""
    return to_text(value).replace(to_text(search), to_text(replacement))


def regex_replace(
    value: object, pattern: object, replacement: object, flags: object = "g"
) -> str:
    """Regex replacement with JavaScript-style flags (``g``, ``i``, ``m``, ``s``).

    Without ``g`` only the first match is replaced. ``$1`` and ``$&`` in the
    replacement refer to groups, as in JavaScript.
    """
    flag_text = to_text(flags) or "g"
    compiled_flags = 0
    for flag in flag_text:
        compiled_flags |= _REGEX_FLAGS.get(flag, 0)
    template = _GROUP_REFERENCE.sub(
        lambda m: r"\g<0>" if m.group(1) == "&" else rf"\g<{m.group(1)}>",
        to_text(replacement).replace("\\", "\\\\"),
    )
    count = 0 if "g" in flag_text else 1
    return re.sub(to_text(pattern), template, to_text(value), count=count, flags=compiled_flags)


def slice_text(value: object, start: object = 0, end: object = None) -> str:
    """Slice with Python semantics; negative indices count from the end."""
    stop = None if is_missing(end) else int(to_number(end))
    return to_text(value)[int(to_number(start)) : stop]


def substring(value: object, start: object = 0, end: object = None) -> str:
    """Substring with JavaScript semantics: negatives clamp to 0, bounds swap."""
    text = to_text(value)
    lo = min(max(int(to_number(start)), 0), len(text))
    hi = len(text) if is_missing(end) else min(max(int(to_number(end)), 0), len(text))
    if lo > hi:
        lo, hi = hi, lo
    return text[lo:hi]


def pad_start(value: object, length: object, pad: object = " ") -> str:
    text = to_text(value)
    return _pad(text, int(to_number(length)), to_text(pad) or " ") + text


def pad_end(value: object, length: object, pad: object = " ") -> str:
    text = to_text(value)
    return text + _pad(text, int(to_number(length)), to_text(pad) or " ")


def split(value: object, separator: object = ",") -> list[str]:
    text, sep = to_text(value), to_text(separator)
    if not sep:
        return list(text)
    return text.split(sep)


def join(values: object, separator: object = ", ") -> str:
    """Join a list's items as strings; non-lists give an empty string."""
    if not is_sequence(values):
        return ""
    return to_text(separator).join(to_text(item) for item in values)  # pyright: ignore[reportGeneralTypeIssues]


def trim(value: object) -> str:
    return to_text(value).strip()


def trim_start(value: object) -> str:
    return to_text(value).lstrip()


def trim_end(value: object) -> str:
    return to_text(value).rstrip()


def slugify(value: object) -> str:
    """``"Hello World!"`` -> ``"hello-world"``."""
    text = to_text(value).lower().strip()
    text = re.sub(r"[^\w\s-]", "", text)
    text = re.sub(r"[\s_-]+", "-", text)
    return text.strip("-")


def kebab_case(value: object) -> str:
    text = re.sub(r"([a-z])([A-Z])", r"\1-\2", to_text(value))
    return re.sub(r"[\s_]+", "-", text).lower()


def snake_case(value: object) -> str:
    text = re.sub(r"([a-z])([A-Z])", r"\1_\2", to_text(value))
    return re.sub(r"[\s-]+", "_", text).lower()


def camel_case(value: object) -> str:
    text = re.sub(
        r"(?:^\w|[A-Z]|\b\w)",
        lambda m: m.group(0).lower() if m.start() == 0 else m.group(0).upper(),
        to_text(value),
    )
    return re.sub(r"\s+", "", text)


def pluralize(value: object, count: object = None) -> str:
    """Naive English plural; returns the word unchanged when ``count`` is 1."""
    word = to_text(value)
    if not is_missing(count) and to_number(count, -1) == 1:
        return word
    if word.endswith("y"):
        return f"{word[:-1]}ies"
    if word.endswith(("s", "x", "z", "ch", "sh")):
        return f"{word}es"
    return f"{word}s"


def singularize(value: object) -> str:
    """Naive inverse of :func:`pluralize`."""
    word = to_text(value)
    if word.endswith("ies"):
        return f"{word[:-3]}y"
    if word.endswith("es") and len(word) > 2:
        stem = word[:-2]
        if stem.endswith(("s", "x", "z", "ch", "sh")):
            return stem
    if word.endswith("s") and len(word) > 1:
        return word[:-1]
    return word


def ellipsis(value: object, max_length: object = 50) -> str:
    """Like ``truncate`` but with a caller-chosen length."""
    text = to_text(value)
    limit = int(to_number(max_length, 50)) or 50
    return f"{text[: max(limit - 3, 0)]}..." if len(text) > limit else text


STRING_HELPERS = {
    "replace": replace,
    "replace_all": replace_all,
    "regex_replace": regex_replace,
    "slice": slice_text,
    "substring": substring,
    "pad_start": pad_start,
    "pad_end": pad_end,
    "split": split,
    "join": join,
    "trim": trim,
    "trim_start": trim_start,
    "trim_end": trim_end,
    "slugify": slugify,
    "kebab_case": kebab_case,
    "camel_case": camel_case,
    "snake_case": snake_case,
    "pluralize": pluralize,
    "singularize": singularize,
    "ellipsis": ellipsis,
}
