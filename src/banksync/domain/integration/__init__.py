"""Integration domain package.

This package bridges the banking source and the document store. It
contains the reconciliation of fetched records against stored ones and
the incremental merge of daily balances into balance histories.
"""
