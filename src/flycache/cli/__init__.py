"""FlyCache CLI."""
