#!/usr/bin/env python
"""Dump the header lexer's tokens (trivia included) for one file."""

import argparse
from pathlib import Path

from unrealdocpy.lexer import Lexer, Token, token_text


def format_token(idx: int, token: Token, source: str) -> str:
    return (
        f"[{idx}] kind={token.kind.name} "
        f"text={token_text(source, token)!r} "
        f"range={token.range.as_tuple()} "
        f"flags={token.flags!r}"
    )


def main() -> int:
    parser = argparse.ArgumentParser(description="Dump header tokens")
    parser.add_argument("header", type=Path, help="Header file to tokenize")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the dump to this file instead of stdout",
    )
    args = parser.parse_args()

    text = args.header.read_text(encoding="utf-8-sig")
    lexer = Lexer(text)
    tokens = lexer.lex()
    lines = [format_token(idx, token, text) for idx, token in enumerate(tokens)]
    lines.extend(
        f"{diagnostic.severity.upper()} {diagnostic.code} range={diagnostic.range.as_tuple()} {diagnostic.message}"
        for diagnostic in lexer.diagnostics
    )

    if args.output is None:
        print("\n".join(lines))
        return 0

    args.output.parent.mkdir(parents=True, exist_ok=True)
    with args.output.open("w", encoding="utf-8") as f:
        for line in lines:
            f.write(line + "\n")

    print(f"Wrote {len(tokens)} tokens to {args.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
