"""Page objects for the demo site."""
