"""Job scanner package.

The package is laid out as a pipeline:
- `sources/` contains per-source connectors that fetch raw postings.
- `fetch.py` wraps them with caching, retries and pacing.
- `models.py` defines the canonical record every source maps into.
- `normalize.py`, `enrich.py`, `dedupe.py`, `filter.py` and `rank.py` are
  the pure stages; `pipeline.py` wires them together.
"""

__version__ = "0.1.0"
