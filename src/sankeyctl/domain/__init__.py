"""Domain layer — records, flow graph types, and the graph builder.

Pure data and functions. Never imports from services, output, or commands.
"""
