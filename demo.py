#!/usr/bin/env python3
"""
Complete demo of the gasless vault
"""

import logging

from gasless_vault.errors import VaultError
from gasless_vault.keys import Keypair
from gasless_vault.program import VaultProgram


def main():
    logging.basicConfig(level=logging.INFO, format="   [%(name)s] %(message)s")

    print("=" * 60)
    print("🏦 GASLESS VAULT - COMPLETE DEMO")
    print("=" * 60)
    print()

    # Step 1: Setup
    print("🔧 STEP 1: Generating participant keys")
    print("-" * 40)

    names = ["Authority", "Depositor", "Borrower", "Sponsor", "Recipient 1", "Recipient 2", "Recipient 3"]
    keys = {name: Keypair() for name in names}
    for name, keypair in keys.items():
        print(f"✅ {name}: {keypair.pubkey[:16]}...")
    print()

    authority = keys["Authority"]
    program = VaultProgram()
    tokens = program.token_program

    # Step 2: Create Vault
    print("🏗️  STEP 2: Initializing the vault")
    print("-" * 40)

    result = program.initialize(authority.sign_instruction('initialize'))
    vault = result['vault']
    print(f"✅ Vault: {vault}")
    print(f"✅ Whitelist: {result['whitelist']}")
    print()

    def sign(keypair, instruction, **params):
        return keypair.sign_instruction(instruction, vault=vault, **params)

    # Step 3: Register a token
    print("🪙 STEP 3: Registering a token")
    print("-" * 40)

    mint = tokens.create_mint(9, authority.pubkey).address
    registered = program.register_token(sign(authority, 'register_token', mint=mint), mint)
    print(f"✅ Mint: {mint[:16]}...")
    print(f"✅ Custodial account: {registered['token_account'][:16]}...")
    print(f"✅ Tokens registered: {program.vault_state()['token_count']}")
    print()

    # Step 4: Whitelist and deposit
    print("💰 STEP 4: Whitelisting the borrower and depositing 900")
    print("-" * 40)

    borrower = keys["Borrower"]
    program.add_to_whitelist(sign(authority, 'add_to_whitelist', address=borrower.pubkey), borrower.pubkey)

    depositor = keys["Depositor"]
    source = tokens.create_account(mint, depositor.pubkey).address
    tokens.mint_to(mint, source, 1_000, authority.sign_instruction('mint_to', mint=mint, account=source, amount=1_000))

    balance = program.deposit(
        sign(depositor, 'deposit', mint=mint, depositor_token_account=source, amount=900), mint, source, 900
    )
    print(f"✅ Custodial balance: {balance:,}")
    print()

    # Step 5: Distributions
    print("📤 STEP 5: Borrow and distribute (fees paid by the sponsor)")
    print("-" * 40)

    recipients = [tokens.create_account(mint, keys[f"Recipient {i}"].pubkey).address for i in (1, 2, 3)]

    def distribute(amount):
        params = dict(mint=mint, amount=amount, recipients=recipients)
        return program.borrow_and_distribute(
            sign(borrower, 'borrow_and_distribute', **params),
            sign(keys["Sponsor"], 'borrow_and_distribute', **params),
            mint, amount, recipients
        )

    print("Test 1: 901 tokens (not divisible by 3)")
    try:
        distribute(901)
        print("   ❌ UNEXPECTED: Should have failed")
    except VaultError as e:
        print(f"   ✅ EXPECTED FAILURE: {e} (code {e.code})")
        print(f"   💰 Custodial balance still {program.custodial_balance(mint):,}")
    print()

    print("Test 2: 900 tokens")
    result = distribute(900)
    print(f"   ✅ SUCCESS: {result['per_recipient']:,} to each recipient")
    for i, account in enumerate(recipients, 1):
        print(f"   Recipient {i}: {tokens.balance_of(account):,}")
    print()

    # Step 6: Summary
    print("📈 STEP 6: Final state")
    print("-" * 40)

    ledger = program.borrower_account(borrower.pubkey)
    print(f"   Custodial balance: {program.custodial_balance(mint):,}")
    print(f"   Borrower total for mint: {ledger.borrowed(mint):,}")
    print(f"   Whitelisted addresses: {len(program.whitelist_state()['addresses'])}")
    print()
    print("🎯 Demo completed successfully!")


if __name__ == "__main__":
    main()
