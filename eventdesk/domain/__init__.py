"""Domain records and validation rules, free of storage and HTTP concerns."""
