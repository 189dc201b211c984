"""Quoted-field tokenizer for comma-delimited account rows.

The scanner keeps two states, unquoted and quoted, plus a count of the
characters read since the last opening quote:

- a delimiter outside quotes closes the current field;
- a delimiter inside quotes is kept as data;
- a quote outside quotes opens a quoted run and is dropped;
- a quote directly after an opening quote is an escaped quote: one literal
  quote is kept and the scanner leaves the quoted run;
- any other quote inside quotes closes the quoted run and is dropped.

Malformed quoting never raises; an unterminated quote simply runs to the end
of the line. This is deliberately not RFC 4180: ``stark""industries`` yields
``stark"industries`` and runs of three or more quotes are consumed one
escape at a time.
"""

from __future__ import annotations

import re

from account_merge.common.constants import DELIMITER, QUOTE

# Every sequence matched by a Unicode line-break class.
LINE_BREAK_RE = re.compile(r"\r\n|[\n\x0b\x0c\r\x85\u2028\u2029]")


def scrub_line(line: str) -> str:
    """Remove line breaks and strip leading/trailing delimiter runs."""
    return LINE_BREAK_RE.sub("", line).strip(DELIMITER)


def _split_fields(line: str) -> list[str]:
    fields: list[str] = []
    buffer: list[str] = []
    inside_quote = False
    chars_since_quote_open = 0

    for char in line:
        if char == QUOTE:
            if not inside_quote:
                inside_quote = True
                chars_since_quote_open = 0
            elif chars_since_quote_open == 0:
                buffer.append(char)
                chars_since_quote_open += 1
                inside_quote = False
            else:
                inside_quote = False
        elif char == DELIMITER and not inside_quote:
            fields.append("".join(buffer))
            buffer = []
        else:
            buffer.append(char)
            if inside_quote:
                chars_since_quote_open += 1

    fields.append("".join(buffer))
    return fields


def tokenize(line: str) -> list[str]:
    """Split one raw line into its positional fields. Never raises."""
    return _split_fields(scrub_line(line))
