"""
MIT License

Console entry-point for gbextract.
"""

from __future__ import annotations

from typing import List, Optional

from .cli import build_parser, dispatch


def main(argv: Optional[List[str]] = None) -> None:
    """Entry-point used by `python -m gbextract` and the console script."""
    parser = build_parser()
    args = parser.parse_args(argv)
    dispatch(args)


if __name__ == "__main__":
    main()
