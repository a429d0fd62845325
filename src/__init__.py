"""vaultdigest: summarize a Markdown vault's inbox into weekly focus notes."""

__version__ = "0.1.0"
