"""Application workflows composing the tally engine with its collaborators."""
