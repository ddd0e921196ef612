"""
One-shot provisioning for a new Mac: Rosetta 2, Homebrew, everyday casks and the shell profile.
"""

__all__ = ["environment", "provision", "cli"]
__version__ = "0.1.0"
