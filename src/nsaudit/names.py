from __future__ import annotations


def fqdn(name: str) -> str:
    name = (name or "").strip()
    if not name or name == ".":
        return "."
    return name if name.endswith(".") else name + "."


def _skip_escape(domain: str, i: int) -> int:
    # domain[i] is a backslash: either \DDD or \X
    if domain[i + 1:i + 4].isdigit() and len(domain[i + 1:i + 4]) == 3:
        return i + 4
    return i + 2


def parent_of(domain: str) -> str:
    """
    Drop the leftmost label of a presentation-format name.

    Escaped dots (``\\.`` or ``\\046``) do not end a label. When nothing is left
    after the first label the root "." is returned.
    """
    i = 0
    while i < len(domain):
        c = domain[i]
        if c == "\\":
            i = _skip_escape(domain, i)
            continue
        if c == ".":
            rest = domain[i + 1:]
            return rest if rest else "."
        i += 1
    return "."
