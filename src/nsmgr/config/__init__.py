"""Configuration: TOML sections, unified settings, and logging setup."""
