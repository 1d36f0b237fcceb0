"""
KBTC contracts: the contract standard library plus the collaborator
contracts the treasury drives (token ledgers, price oracle, boardroom and
fund sinks).
"""
