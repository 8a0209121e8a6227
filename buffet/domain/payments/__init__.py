"""Payment domain - installments, cash flow entries and analytics"""
