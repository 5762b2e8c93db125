"""
ring: parallel TCP connect and ICMP ping prober.
"""

__version__ = "0.2.0"
