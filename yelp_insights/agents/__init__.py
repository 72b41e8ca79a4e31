"""
Query, memory, analysis and report agents.
"""
