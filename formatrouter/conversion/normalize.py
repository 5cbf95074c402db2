"""Canonical extension names for conversion lookups and output file names."""

_INPUT_ALIASES = {
    "jfif": "jpeg",
    "jpg": "jpeg",
    "htm": "html",
    "tex": "latex",
    "md": "markdown",
}

_OUTPUT_ALIASES = {
    "jpeg": "jpg",
    "latex": "tex",
    "markdown": "md",
}


def normalize_filetype(filetype: str) -> str:
    """Map a raw source extension to the name used in capability tables."""
    lowered = filetype.lower()
    return _INPUT_ALIASES.get(lowered, lowered)


def normalize_output_filetype(filetype: str) -> str:
    """Map a target extension to the suffix written on output files."""
    lowered = filetype.lower()
    return _OUTPUT_ALIASES.get(lowered, lowered)
