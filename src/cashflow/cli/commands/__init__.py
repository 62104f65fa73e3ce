"""CLI command modules. Each one exposes ``register_commands(cli)``."""
