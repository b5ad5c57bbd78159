"""Sub-command modules; each exposes ``configure_parser``."""
