"""Command line tool around the save codec."""
