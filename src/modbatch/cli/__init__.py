"""Command line tools for modbatch."""
