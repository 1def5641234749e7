"""Copy naming for duplicated entities."""

import re
from typing import Iterable

# "{base} Copy {N}", matched against the whole name
COPY_NAME_PATTERN = re.compile(r"(.*?)\s+Copy\s+(\d+)", re.DOTALL)


def extract_base_name(name: str) -> str:
    """Strip a trailing " Copy N" suffix, if any.

    Examples:
        "Week 1" -> "Week 1"
        "Week 1 Copy 5" -> "Week 1"
    """
    match = COPY_NAME_PATTERN.fullmatch(name)
    if match:
        return match.group(1)
    return name


def generate_copy_name(source_name: str, existing_names: Iterable[str]) -> str:
    """Generate a non-colliding "{base} Copy {N}" name.

    Duplicating a copy numbers from the original base name, and the lowest
    free number is chosen so gaps in the sequence are filled first.

    Examples:
        generate_copy_name("Week 1", []) -> "Week 1 Copy 1"
        generate_copy_name("Week 1", ["Week 1 Copy 1", "Week 1 Copy 3"]) -> "Week 1 Copy 2"
        generate_copy_name("Week 1 Copy 1", ["Week 1 Copy 1"]) -> "Week 1 Copy 2"
    """
    base_name = extract_base_name(source_name)
    sibling_pattern = re.compile(re.escape(base_name) + r"\s+Copy\s+(\d+)")

    taken = set()
    for name in existing_names:
        match = sibling_pattern.fullmatch(name)
        if match:
            taken.add(int(match.group(1)))

    number = 1
    while number in taken:
        number += 1
    return f"{base_name} Copy {number}"
