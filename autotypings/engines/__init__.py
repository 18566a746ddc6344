"""Pipeline engines — parsing, registry resolution and declaration generation."""
