# Copyright 2024-2025 pynlr authors. All rights reserved.


def add_str_header(
    title: str,
    table: str,
) -> str:
    """Add a centered title above a table."""
    table_width = max(len(line) for line in table.split("\n"))
    total_width = max(table_width, len(title))
    title_centered = title.center(total_width)

    return f"{title_centered}\n{table}"


def boxify(text: str, padding: int = 1) -> str:
    """Wraps the given text in a Unicode box with optional horizontal padding."""
    lines = text.splitlines()
    pad = " " * padding
    content_width = max(len(line) for line in lines)
    box_width = content_width + 2 * padding

    boxed_lines = ["╔" + "═" * box_width + "╗"]
    for line in lines:
        boxed_lines.append(f"║{pad}{line.ljust(content_width)}{pad}║")
    boxed_lines.append("╚" + "═" * box_width + "╝")

    return "\n".join(boxed_lines)
