#!/usr/bin/env python3
"""
Example: Setting up a vault with two tokens and a whitelist
"""

from gasless_vault.config import VaultConfig
from gasless_vault.keys import Keypair
from gasless_vault.program import VaultProgram


def main():
    print("=== Creating Gasless Vault ===")
    print()

    config = VaultConfig.from_env()
    print("📋 Vault Config:")
    print(f"   Whitelist capacity: {config.whitelist_capacity}")
    print(f"   Ledger capacity: {config.ledger_capacity} tokens per borrower")
    print(f"   Duplicate recipients allowed: {config.allow_duplicate_recipients}")
    print()

    authority = Keypair()
    program = VaultProgram(config=config)
    result = program.initialize(authority.sign_instruction('initialize'))
    vault = result['vault']

    print("🏗️  Vault Created Successfully!")
    print(f"   Vault: {vault}")
    print(f"   Authority: {authority.pubkey}")
    print(f"   Bump: {result['bump']}")
    print()

    print("🪙 Registering tokens...")
    for symbol in ("USDC", "WSOL"):
        mint = program.token_program.create_mint(6, authority.pubkey).address
        registered = program.register_token(
            authority.sign_instruction('register_token', vault=vault, mint=mint), mint
        )
        print(f"   {symbol}: sub-vault {registered['token_vault'][:16]}...")
    print(f"   Token count: {program.vault_state()['token_count']}")
    print()

    print("📝 Whitelisting borrowers...")
    for name in ("Alice", "Bob"):
        address = Keypair().pubkey
        program.add_to_whitelist(
            authority.sign_instruction('add_to_whitelist', vault=vault, address=address), address
        )
        print(f"   {name}: {address[:16]}...")

    print()
    print(f"✅ {len(program.whitelist_state()['addresses'])} borrowers whitelisted")


if __name__ == "__main__":
    main()
