"""Auth module — password login, session tokens, role guard."""
