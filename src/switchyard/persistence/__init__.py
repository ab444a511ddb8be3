"""Persistence — portable snapshots of a route table.

A snapshot is a JSON document holding every compiled rule once, plus the
order in which each method bucket references them. Controllers that JSON
cannot carry (functions, closures, bound methods) are stored as tagged
entries and rebuilt on load::

    data = router.serialize(registry)
    warm = Router().unserialize(data, registry)
"""
