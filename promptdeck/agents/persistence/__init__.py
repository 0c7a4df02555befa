"""
Multi-tier project persistence.
"""
