"""
API server package: HTTP interface over the extraction adapter, persistence
envelope and aggregation engine.
"""
