"""
pbn-tournament-import
=====================
Import, store and export bridge tournaments in PBN (Portable Bridge Notation).

This package provides functionality to:
- Parse PBN files into tournament and board records
- Decode deal strings into seat hands whichever seat they start from
- Report boards that could not be decoded without aborting the import
- Store tournaments in CSV or Parquet tables, one per name and date
- Write stored tournaments back out as PBN
"""

__version__ = "0.1.0"

# Note: With a flat module structure, imports should be done directly:
# Example:
#   from pbn_parse import parse_pbn, parse
#   from pbn_export import serialize_tournament
#   from common_objects import TournamentRecord, BoardRecord, Direction
