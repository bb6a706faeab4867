"""
Ingestion — document decoding and word-window chunking.

Converts a raw document (plain text or PDF) into the ordered chunk
sequence consumed by the embedding driver.
"""
