"""slotwatch - facility reservation availability monitor."""
