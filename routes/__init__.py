"""Flask blueprints for the demo host app."""
