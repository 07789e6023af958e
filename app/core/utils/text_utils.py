def strip_text(v: str | None) -> str | None:
    if v is None:
        return None
    if not isinstance(v, str):
        return v
    v = v.strip()
    return v or None
