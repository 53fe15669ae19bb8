"""SectionVault: versioned document sections with full, restorable history."""

__version__ = "1.0.0"
