"""
Event registration tickets: checksummed QR payloads and wallet pass payloads.
"""

__version__ = "1.0.0"
