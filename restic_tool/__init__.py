"""Building blocks of the restic backup client."""
