from snippet_engine.core.files import expand_source

FNV_OFFSET_BASIS = 0x811C9DC5
FNV_PRIME = 0x01000193


def fnv1a_32(data: bytes) -> int:
    value = FNV_OFFSET_BASIS
    for byte in data:
        value ^= byte
        value = (value * FNV_PRIME) & 0xFFFFFFFF
    return value


def hash_source(source: str, expanded: bool = False) -> int:
    """Hash the expanded form of ``source`` with 32-bit FNV-1a.

    Pass ``expanded=True`` when ``source`` has already been through ``@import``
    expansion. Empty input hashes to 0.
    """
    normalized = source if expanded else expand_source(source)
    if not normalized:
        return 0
    return fnv1a_32(normalized.encode("utf-8"))
