"""
Accounting app: imprest funds, the append-only fund ledger, expense
categories, and the expense approval workflow.

Layout:
    models/          Ledger store (funds, transactions, expenses, categories)
    ledger/          Balance calculator and transaction recorder
    state_machines/  Status enums and the expense transition table
    services/        FundService and ExpenseService
"""
