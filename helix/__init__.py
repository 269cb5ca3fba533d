"""Helix -- fullstack FBCA project generator.

Composes the UIKit (frontend) and AppKit (backend) generators and layers the
Helix fullstack integration template on top.
"""

__version__ = "1.0.0"
