"""
Video module: source resolution, range-aware stream proxy and metadata endpoint.
"""
