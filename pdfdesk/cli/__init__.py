"""Command line interface for PdfDesk."""
