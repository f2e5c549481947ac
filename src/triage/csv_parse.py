"""Line-oriented CSV tokenizer.

Handles double-quoted fields with ``""`` escaping. Records never span
lines: the caller splits the text on ``\\n`` first.
"""

from __future__ import annotations


def split_lines(text: str) -> list[str]:
    """Split *text* into lines, dropping lines that are blank once stripped."""
    return [line for line in text.split("\n") if line.strip()]


def parse_csv_line(line: str) -> list[str]:
    """Tokenize one line of CSV into trimmed field strings.

    A ``"`` toggles quoting, except that ``""`` inside a quoted field
    yields one literal quote. Commas inside quotes are literal. An
    unterminated quote is not an error: the pending field is emitted
    when the line ends.

    Parameters
    ----------
    line : str
        A single line of CSV text, without its trailing newline.

    Returns
    -------
    list[str]
        Field values in column order; ``[]`` for an empty line.
    """
    if not line:
        return []

    values: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    n = len(line)

    while i < n:
        char = line[i]
        if char == '"':
            if in_quotes and i + 1 < n and line[i + 1] == '"':
                current.append('"')
                i += 2
                continue
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            values.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1

    values.append("".join(current).strip())
    return values


def parse_header(line: str) -> list[str]:
    """Tokenize a header line and strip any stray quote characters."""
    return [name.replace('"', "") for name in parse_csv_line(line)]
