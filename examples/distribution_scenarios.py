#!/usr/bin/env python3
"""
Example: Testing various borrow-and-distribute scenarios
"""

from gasless_vault.errors import VaultError
from gasless_vault.keys import Keypair
from gasless_vault.program import VaultProgram


def main():
    print("=== Testing Distribution Scenarios ===")
    print()

    # Setup vault
    print("🏗️  Setting up test vault...")

    authority, borrower, outsider, sponsor, depositor = (Keypair() for _ in range(5))
    program = VaultProgram()
    tokens = program.token_program
    vault = program.initialize(authority.sign_instruction('initialize'))['vault']

    mint = tokens.create_mint(6, authority.pubkey).address
    program.register_token(authority.sign_instruction('register_token', vault=vault, mint=mint), mint)
    program.add_to_whitelist(
        authority.sign_instruction('add_to_whitelist', vault=vault, address=borrower.pubkey), borrower.pubkey
    )

    source = tokens.create_account(mint, depositor.pubkey).address
    tokens.mint_to(
        mint, source, 1_000_000,
        authority.sign_instruction('mint_to', mint=mint, account=source, amount=1_000_000)
    )
    program.deposit(
        depositor.sign_instruction('deposit', vault=vault, mint=mint, depositor_token_account=source, amount=600_000),
        mint, source, 600_000
    )

    recipients = [tokens.create_account(mint, Keypair().pubkey).address for _ in range(3)]

    print(f"   Custodial balance: {program.custodial_balance(mint):,}")
    print()

    scenarios = [
        {'name': 'Even split', 'amount': 300_000, 'borrower': borrower, 'should_pass': True},
        {'name': 'Zero amount', 'amount': 0, 'borrower': borrower, 'should_pass': False},
        {'name': 'Remainder of one', 'amount': 100_000, 'borrower': borrower, 'should_pass': False},
        {'name': 'Not whitelisted', 'amount': 3_000, 'borrower': outsider, 'should_pass': False},
        {'name': 'More than the vault holds', 'amount': 600_000, 'borrower': borrower, 'should_pass': False},
        {'name': 'Remaining balance', 'amount': 300_000, 'borrower': borrower, 'should_pass': True},
    ]

    for i, scenario in enumerate(scenarios, 1):
        print(f"📝 Test {i}: {scenario['name']}")
        print(f"   Amount: {scenario['amount']:,}")

        params = dict(vault=vault, mint=mint, amount=scenario['amount'], recipients=recipients)
        try:
            result = program.borrow_and_distribute(
                scenario['borrower'].sign_instruction('borrow_and_distribute', **params),
                sponsor.sign_instruction('borrow_and_distribute', **params),
                mint, scenario['amount'], recipients
            )
            print(f"   ✅ Distributed {result['per_recipient']:,} to each recipient")
            print(f"   💰 Custodial balance: {result['custodial_balance']:,}")

            if scenario['should_pass']:
                print(f"   ✅ Expected result: PASS")
            else:
                print(f"   ❌ Unexpected result: Should have failed")

        except VaultError as e:
            print(f"   ❌ Distribution rejected: {e}")
            if not scenario['should_pass']:
                print(f"   ✅ Expected result: FAIL")
            else:
                print(f"   ❌ Unexpected result: Should have passed")

        print()

    ledger = program.borrower_account(borrower.pubkey)
    print(f"📒 Borrower ledger: {ledger.borrowed(mint):,} borrowed")
    print()
    print("🎯 Distribution testing complete!")


if __name__ == "__main__":
    main()
