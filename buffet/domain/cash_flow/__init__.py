"""Cash flow domain - income/expense ledger"""
