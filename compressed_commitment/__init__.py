"""
Compressed Pedersen commitments over petlib elliptic curves.

⚠️ DRAFT — requires crypto review before production use
"""

__version__ = "0.1.0"
