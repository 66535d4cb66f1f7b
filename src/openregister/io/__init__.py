from __future__ import annotations

from .tabular import TabularDecoder, parse_json, parse_tsv

__all__ = ["TabularDecoder", "parse_tsv", "parse_json"]
