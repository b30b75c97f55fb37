"""
Ingestion layer — loads columnar inventory snapshots from disk.

Submodules:
  snapshot — JSON / Parquet snapshot reader producing ``ColumnarSnapshot``.
"""
