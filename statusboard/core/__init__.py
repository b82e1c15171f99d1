"""Core domain: ordering, filtering, status rules, storage and service layer."""
