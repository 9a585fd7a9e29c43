"""Terminal UI for browsing attached database accounts."""
