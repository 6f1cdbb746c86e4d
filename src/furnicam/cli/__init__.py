"""Command line interface for furnicam."""
