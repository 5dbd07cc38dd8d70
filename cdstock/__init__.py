"""CD Stock notification, broadcast and direct chat service."""
