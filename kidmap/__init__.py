"""
KidMap: kid-friendly venue discovery API
"""
