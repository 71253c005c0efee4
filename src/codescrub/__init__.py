"""
codescrub - converts source trees into scrubbed plain-text mirrors.
"""

__version__ = "0.1.0"
