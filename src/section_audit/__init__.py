"""
section-audit - section label auditing for Phoenix LiveView modules

Checks that LiveView modules group their callbacks under labeled comment
sections and can insert the missing labels automatically.
"""

__version__ = "0.3.0"
__all__ = ["__version__"]
