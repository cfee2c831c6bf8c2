"""vaultport — flatten a wiki-linked markdown vault into a set/page archive."""

__version__ = "0.4.0"
