"""Pure progression engine: 1RM estimation, BILBO rules, statistics."""
