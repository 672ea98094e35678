"""
Core settings, errors, icons and cache client
"""
