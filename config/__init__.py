"""Process configuration: YAML defaults with environment overrides."""
