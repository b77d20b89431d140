"""Core of the GTB FIT tracker: storage, aggregation, lookup and export."""
