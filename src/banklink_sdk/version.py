"""Version information for the Banklink Python SDK"""

__version__ = "0.1.0"
