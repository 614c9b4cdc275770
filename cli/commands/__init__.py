"""sproc-gen subcommands."""
