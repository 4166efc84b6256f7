"""itrack subcommands."""
