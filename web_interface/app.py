#!/usr/bin/env python3
"""
Web interface for the gasless vault
"""

import logging
import os
import sys

from flask import Flask, jsonify, request
from werkzeug.exceptions import BadRequest

# Add project root to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from gasless_vault.config import VaultConfig
from gasless_vault.errors import AccountError, SignatureError, TokenError, VaultError
from gasless_vault.keys import Keypair
from gasless_vault.program import VaultProgram

logger = logging.getLogger(__name__)


def create_app(config: VaultConfig = None) -> Flask:
    app = Flask(__name__)

    # Demo only: one in-process vault, keys held server-side by name
    program = VaultProgram(config=config or VaultConfig.from_env())
    wallets = {}
    state = {'authority': None}

    def wallet(name: str) -> Keypair:
        if name not in wallets:
            raise KeyError(f"Unknown wallet {name!r}")
        return wallets[name]

    def authority() -> Keypair:
        if state['authority'] is None:
            raise KeyError("Vault not initialized")
        return state['authority']

    def sign(keypair: Keypair, instruction: str, **params):
        return keypair.sign_instruction(instruction, vault=program.vault_address, **params)

    @app.errorhandler(VaultError)
    def vault_error(e):
        logger.warning("Rejected %s: %s", request.path, e)
        return jsonify({'success': False, 'error': str(e), 'code': e.code}), 400

    @app.errorhandler(AccountError)
    @app.errorhandler(TokenError)
    @app.errorhandler(SignatureError)
    def host_error(e):
        logger.warning("Rejected %s: %s", request.path, e)
        return jsonify({'success': False, 'error': str(e), 'code': type(e).__name__}), 400

    # BadRequestKeyError (missing JSON field) is also a KeyError
    @app.errorhandler(BadRequest)
    def bad_request(e):
        return jsonify({'success': False, 'error': e.description}), 400

    @app.errorhandler(KeyError)
    def not_found(e):
        return jsonify({'success': False, 'error': e.args[0]}), 404

    @app.route('/api/initialize', methods=['POST'])
    def initialize():
        keypair = Keypair()
        result = program.initialize(keypair.sign_instruction('initialize'))
        state['authority'] = keypair
        wallets['authority'] = keypair

        return jsonify({'success': True, 'authority': keypair.pubkey, **result})

    @app.route('/api/wallets', methods=['POST'])
    def create_wallet():
        name = request.json['name']
        keypair = wallets.setdefault(name, Keypair())
        return jsonify({'success': True, 'name': name, 'pubkey': keypair.pubkey})

    @app.route('/api/whitelist', methods=['POST'])
    def add_to_whitelist():
        address = request.json['address']
        added = program.add_to_whitelist(sign(authority(), 'add_to_whitelist', address=address), address)
        return jsonify({'success': True, 'added': added})

    @app.route('/api/whitelist/<address>', methods=['DELETE'])
    def remove_from_whitelist(address):
        removed = program.remove_from_whitelist(sign(authority(), 'remove_from_whitelist', address=address), address)
        return jsonify({'success': True, 'removed': removed})

    @app.route('/api/tokens', methods=['POST'])
    def register_token():
        data = request.json or {}
        mint = program.token_program.create_mint(data.get('decimals', 9), authority().pubkey)
        result = program.register_token(sign(authority(), 'register_token', mint=mint.address), mint.address)
        return jsonify({'success': True, 'mint': mint.address, **result})

    @app.route('/api/accounts', methods=['POST'])
    def create_account():
        """Open a token account for a wallet, optionally minting into it"""
        data = request.json
        owner = wallet(data['owner'])
        account = program.token_program.create_account(data['mint'], owner.pubkey)

        amount = data.get('amount', 0)
        if amount:
            sig = authority().sign_instruction('mint_to', mint=data['mint'], account=account.address, amount=amount)
            program.token_program.mint_to(data['mint'], account.address, amount, sig)

        return jsonify({'success': True, 'account': account.address, 'balance': account.amount})

    @app.route('/api/accounts/<address>')
    def get_account(address):
        account = program.token_program.get_account(address)
        return jsonify({'address': address, 'mint': account.mint, 'owner': account.owner, 'balance': account.amount})

    @app.route('/api/deposit', methods=['POST'])
    def deposit():
        data = request.json
        depositor = wallet(data['depositor'])
        sig = sign(depositor, 'deposit', mint=data['mint'],
                   depositor_token_account=data['account'], amount=data['amount'])

        balance = program.deposit(sig, data['mint'], data['account'], data['amount'])
        return jsonify({'success': True, 'custodial_balance': balance})

    @app.route('/api/borrow', methods=['POST'])
    def borrow():
        data = request.json
        params = dict(mint=data['mint'], amount=data['amount'], recipients=data['recipients'])

        result = program.borrow_and_distribute(
            sign(wallet(data['borrower']), 'borrow_and_distribute', **params),
            sign(wallet(data['fee_payer']), 'borrow_and_distribute', **params),
            data['mint'], data['amount'], data['recipients']
        )
        return jsonify(result)

    @app.route('/api/vault')
    def get_vault():
        return jsonify({'vault': program.vault_state(), 'whitelist': program.whitelist_state()})

    @app.route('/api/borrower/<pubkey>')
    def get_borrower(pubkey):
        account = program.borrower_account(pubkey)
        if account is None:
            return jsonify({'error': 'Borrower not found'}), 404
        return jsonify(account.to_dict())

    return app


app = create_app()

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    port = int(os.environ.get("PORT", 10000))
    app.run(
        host="0.0.0.0",
        port=port,
        debug=False
    )
