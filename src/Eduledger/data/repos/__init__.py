"""Per-entity operations over the Store, including cross-collection cascades."""
