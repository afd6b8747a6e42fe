"""
Sales records: products, clients and invoices.

The alerts app scans these tables: product stock against its alert
threshold, and unpaid invoices past their due date.
"""
