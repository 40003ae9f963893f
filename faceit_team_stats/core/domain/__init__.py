"""Pure domain policies of the statistics pipeline."""
