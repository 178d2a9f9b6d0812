"""Banking domain package.

This package contains the domain model for the banking side of a sync run:
accounts, transactions and balance histories as fetched from the
aggregation source, the vendor code tables, and the ports to the source API
and the document store.
"""
