"""quizdeck: answer encoding and result reconciliation for a remote quiz store."""

__version__ = "0.1.0"
