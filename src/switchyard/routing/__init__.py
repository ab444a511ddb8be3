"""Routing — pattern compilation, the per-method rule table, and resolution.

Rules are registered during setup into ordered method buckets; requests
are resolved by scanning those buckets, first match wins.
"""
