"""
Business alerts: advisory notices derived from stock levels and overdue
invoices, with a per-user inbox (read / resolve / delete).
"""
