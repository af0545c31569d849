"""
Remote data ingestion: contracts, extractors and request utilities.
"""
