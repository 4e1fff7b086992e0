"""
Commands - write operations, each run through the mutation pipeline.
"""
